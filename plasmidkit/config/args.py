# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Constructs the command line parser, with one subcommand per operation and
    a small set of options shared by all of them.
"""

import argparse
import os
from typing import Any, AnyStr, List, Tuple

PLASMIDKIT_VERSION = ""  # needs to be set on module import, avoids cyclic imports


class PlasmidkitParser(argparse.ArgumentParser):
    """ Custom argument parser for plasmidkit, allowing arguments to be read
        from simple config files given with @path
    """
    def convert_arg_line_to_args(self, arg_line: str) -> List[str]:
        """ overrides original to properly parse config files """
        line = arg_line.strip()
        if not line:
            return []
        # skip comments and section labels
        if line[0] in ["#", '[']:
            return []
        args = line.split()
        # prepend -- so the parser recognises it properly
        args[0] = "--" + args[0]
        return args

    def get_actions(self) -> Tuple[argparse.Action, ...]:
        """ a getter for _actions operated on by ArgumentParser, which may
            change behaviour """
        return tuple(self._actions)


class FullPathAction(argparse.Action):
    """ An argparse.Action to ensure provided paths are absolute. """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        setattr(namespace, self.dest, os.path.abspath(str(values)))


class ReadableFullPathAction(FullPathAction):
    """ An argparse.Action to ensure provided paths are absolute and readable files. """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,  # type: ignore
                 values: AnyStr, option_string: str = None) -> None:
        path = os.path.abspath(values)
        if os.path.isdir(path):
            raise argparse.ArgumentError(self, f"{values!r} is a directory")
        if not os.path.isfile(path):
            raise argparse.ArgumentError(self, f"{values!r} does not exist")
        if not os.access(path, os.R_OK):
            raise argparse.ArgumentError(self, f"{values!r}: permission denied")
        super().__call__(parser, namespace, values, option_string)


class DirectoryAction(FullPathAction):
    """ An argparse.Action to ensure provided paths are absolute and existing directories. """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,  # type: ignore
                 values: AnyStr, option_string: str = None) -> None:
        path = os.path.abspath(values)
        if not os.path.isdir(path):
            raise argparse.ArgumentError(self, f"{values!r} is not a directory")
        super().__call__(parser, namespace, values, option_string)


class SplitCommaAction(argparse.Action):
    """ An argparse.Action to split an argument in the form of a comma separated
        list into a list of strings.
    """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        setattr(namespace, self.dest, [value.strip() for value in str(values).split(",") if value.strip()])


class FragmentOrderAction(argparse.Action):
    """ An argparse.Action to convert a comma separated list of 1-indexed
        fragment numbers into a list of integers.
    """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        try:
            order = [int(value) for value in str(values).split(",")]
        except ValueError as err:
            raise argparse.ArgumentError(self, f"invalid fragment order: {values!r}") from err
        if any(number < 1 for number in order):
            raise argparse.ArgumentError(self, "fragment numbers start at 1")
        setattr(namespace, self.dest, order)


def _add_sequence_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('sequence',
                        metavar='SEQUENCE',
                        action=ReadableFullPathAction,
                        help="SnapGene, GenBank, FASTA or JSON file containing the sequence.")


def _add_enzymes_option(parser: argparse.ArgumentParser, required: bool = False) -> None:
    parser.add_argument('--enzymes',
                        dest='enzymes',
                        metavar="ENZYME1,ENZYME2,...",
                        action=SplitCommaAction,
                        required=required,
                        default=None,
                        help="A comma separated list of enzyme names.")


def common_options(parser: argparse.ArgumentParser) -> None:
    """ Adds options shared by all subcommands """
    group = parser.add_argument_group("Common options")
    group.add_argument('-v', '--verbose',
                       dest='verbose',
                       action='store_true',
                       default=False,
                       help="Print verbose status information to stderr.")
    group.add_argument('-d', '--debug',
                       dest='debug',
                       action='store_true',
                       default=False,
                       help="Print debugging information to stderr.")
    group.add_argument('--logfile',
                       dest='logfile',
                       default="",
                       metavar="PATH",
                       action=FullPathAction,
                       type=str,
                       help="Also write logging output to a file.")
    group.add_argument('-V', '--version',
                       action='version',
                       version=f"plasmidkit {PLASMIDKIT_VERSION}",
                       help="Display the version number and exit.")


def build_parser(from_config_file: bool = False) -> PlasmidkitParser:
    """ Constructs a PlasmidkitParser with the common options and all
        subcommands.

        Arguments:
            from_config_file: whether to allow loading from file with args like
                                @file

        Returns:
            a PlasmidkitParser instance
    """
    kwargs = {"fromfile_prefix_chars": "@"} if from_config_file else {}
    parser = PlasmidkitParser(prog="plasmidkit",
                              description="Plasmid sequence parsing and cloning simulation",
                              **kwargs)
    common_options(parser)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    info = commands.add_parser("info", help="Summarise a sequence file.")
    _add_sequence_argument(info)

    convert = commands.add_parser("convert", help="Convert between formats, chosen by file extension.")
    _add_sequence_argument(convert)
    convert.add_argument('output', metavar="OUTPUT", action=FullPathAction,
                         help="The file to write, a FASTA, GenBank or JSON file.")

    sites = commands.add_parser("sites", help="List restriction sites.")
    _add_sequence_argument(sites)
    _add_enzymes_option(sites)

    digest = commands.add_parser("digest", help="Simulate a restriction digest.")
    _add_sequence_argument(digest)
    _add_enzymes_option(digest, required=True)

    ligate = commands.add_parser("ligate", help="Digest a sequence and ligate the fragments.")
    _add_sequence_argument(ligate)
    _add_enzymes_option(ligate, required=True)
    ligate.add_argument('--order',
                        dest='order',
                        metavar="2,1,...",
                        action=FragmentOrderAction,
                        default=None,
                        help="The 1-indexed fragments to ligate, in order (default: all, in digest order).")
    topology = ligate.add_mutually_exclusive_group()
    topology.add_argument('--circular', dest='circular', action='store_const', const=True, default=None,
                          help="Make a circular product (default: the topology of the input).")
    topology.add_argument('--linear', dest='circular', action='store_const', const=False,
                          help="Make a linear product.")
    ligate.add_argument('output', metavar="OUTPUT", action=FullPathAction,
                        help="The file to write the product to.")

    primers = commands.add_parser("primers", help="Design a primer pair flanking a region.")
    _add_sequence_argument(primers)
    primers.add_argument('start', type=int, help="The 1-indexed start of the region.")
    primers.add_argument('end', type=int, help="The 1-indexed, inclusive end of the region.")
    primers.add_argument('--primer-length',
                         dest='primer_length',
                         type=int,
                         default=None,
                         help="The length of each primer (default: from config, usually 20).")

    annotate = commands.add_parser("annotate", help="Annotate with features from SnapGene files.")
    _add_sequence_argument(annotate)
    annotate.add_argument('--library',
                          dest='library',
                          metavar="DIR",
                          action=DirectoryAction,
                          required=True,
                          help="A directory of SnapGene files to take features from.")
    annotate.add_argument('-o', '--output',
                          dest='output',
                          metavar="OUTPUT",
                          action=FullPathAction,
                          default="",
                          help="The file to write the annotated sequence to (default: none).")

    return parser
