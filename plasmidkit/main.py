# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" The command line operations, each reading a sequence file and running one
    of the parsing or cloning functions over it.

    The intended entry point is run_plasmidkit() in this file.
"""

import logging
from typing import Callable, Dict, List

from plasmidkit.cloning import (
    annotate_record,
    count_sites_by_enzyme,
    digest_summary,
    find_restriction_sites,
    get_enzymes,
    load_library,
    simulate_digest,
    simulate_ligation,
    with_restriction_sites,
)
from plasmidkit.common import logs
from plasmidkit.common.errors import PlasmidkitError, PlasmidkitInputError
from plasmidkit.common.model import DNASequence, Fragment
from plasmidkit.common.utils import calculate_gc_content, design_primers
from plasmidkit.config import ConfigType
from plasmidkit.formats import read_sequence, write_sequence

__version__ = "1.0.0"


def load_record(path: str) -> DNASequence:
    """ Reads a record from file, ensuring restriction sites are present for
        the common enzyme panel

        Arguments:
            path: the path of the file to read

        Returns:
            the DNASequence read
    """
    try:
        record = read_sequence(path)
    except PlasmidkitError:
        raise
    except ValueError as err:
        raise PlasmidkitInputError(f"could not read {path}: {err}") from err
    if not record.restriction_sites:
        record = with_restriction_sites(record)
    logging.info("Read %s: %d bp, %d features", record.name, record.length, len(record.features))
    return record


def _describe_fragment(number: int, fragment: Fragment) -> str:
    names = ", ".join(feature.name for feature in fragment.features) or "-"
    return f"{number}\t{fragment.start}..{fragment.end}\t{len(fragment)} bp\t{names}"


def run_info(options: ConfigType) -> int:
    """ Prints a summary of a sequence and its annotations """
    record = load_record(options.sequence)
    print(f"Name: {record.name}")
    if record.description:
        print(f"Description: {record.description}")
    print(f"Length: {record.length} bp")
    print(f"Topology: {'circular' if record.circular else 'linear'}")
    print(f"GC content: {calculate_gc_content(record.sequence):.1f}%")
    print(f"Features: {len(record.features)}")
    for feature in record.features:
        print(f"  {feature.type}\t{feature.name}\t{feature.start}..{feature.end}\t{feature.direction}")
    print(f"Primers: {len(record.primers)}")
    for primer in record.primers:
        print(f"  {primer.name}\t{primer.sequence}\t{primer.start}..{primer.end}\t{primer.direction}")
    counts = count_sites_by_enzyme(record.restriction_sites)
    print(f"Restriction sites: {len(record.restriction_sites)}")
    for name, count in sorted(counts.items()):
        print(f"  {name}\t{count}")
    return 0


def run_convert(options: ConfigType) -> int:
    """ Converts a sequence file to another format """
    record = load_record(options.sequence)
    write_sequence(record, options.output)
    logging.info("Wrote %s to %s", record.name, options.output)
    return 0


def run_sites(options: ConfigType) -> int:
    """ Lists the restriction sites of the configured enzymes """
    record = load_record(options.sequence)
    enzymes = get_enzymes(options.enzymes)
    for site in find_restriction_sites(record.sequence, enzymes):
        print(f"{site.name}\t{site.start}..{site.end}\tcuts after {site.cut_position}")
    return 0


def run_digest(options: ConfigType) -> int:
    """ Lists the fragments resulting from a digest """
    record = load_record(options.sequence)
    fragments = simulate_digest(record, options.enzymes)
    for number, fragment in enumerate(fragments, 1):
        print(_describe_fragment(number, fragment))
    print("Sizes: " + ", ".join(f"{size} bp" for size in digest_summary(fragments)))
    return 0


def _order_fragments(fragments: List[Fragment], order: List[int]) -> List[Fragment]:
    if not order:
        return fragments
    for number in order:
        if not 1 <= number <= len(fragments):
            raise PlasmidkitInputError(f"fragment {number} does not exist, digest gave {len(fragments)} fragments")
    return [fragments[number - 1] for number in order]


def run_ligate(options: ConfigType) -> int:
    """ Digests a sequence, then ligates the chosen fragments and writes the product """
    record = load_record(options.sequence)
    fragments = _order_fragments(simulate_digest(record, options.enzymes), options.order)
    circular = record.circular if options.circular is None else options.circular
    product = with_restriction_sites(simulate_ligation(fragments, circular))
    write_sequence(product, options.output)
    print(f"{product.name}: {product.length} bp, {'circular' if circular else 'linear'}, "
          f"{len(product.features)} features, from {len(fragments)} fragments")
    return 0


def run_primers(options: ConfigType) -> int:
    """ Designs primers flanking a region of a sequence """
    record = load_record(options.sequence)
    try:
        primers = design_primers(record.sequence, options.start, options.end, options.primer_length)
    except ValueError as err:
        raise PlasmidkitInputError(str(err)) from err
    for primer in primers:
        print(f"{primer.name}\t{primer.sequence}\t{primer.start}..{primer.end}\t"
              f"Tm {primer.melting_temp:.1f}\tGC {primer.gc_content:.1f}%")
    return 0


def run_annotate(options: ConfigType) -> int:
    """ Annotates a sequence with features from a library of SnapGene files """
    record = load_record(options.sequence)
    annotated = annotate_record(record, load_library(options.library))
    added = annotated.features[len(record.features):]
    for feature in added:
        print(f"{feature.type}\t{feature.name}\t{feature.start}..{feature.end}\t{feature.direction}")
    if options.output:
        write_sequence(annotated, options.output)
        logging.info("Wrote annotated %s to %s", annotated.name, options.output)
    return 0


COMMANDS: Dict[str, Callable[[ConfigType], int]] = {
    "info": run_info,
    "convert": run_convert,
    "sites": run_sites,
    "digest": run_digest,
    "ligate": run_ligate,
    "primers": run_primers,
    "annotate": run_annotate,
}


def run_plasmidkit(options: ConfigType) -> int:
    """ Runs the command given in the options, with logging set up as requested.

        Arguments:
            options: command line options

        Returns:
            0 if the command completed succesfully, otherwise 1
    """
    with logs.changed_logging(logfile=options.get("logfile"), verbose=options.get("verbose", False),
                              debug=options.get("debug", False)):
        result = _run_plasmidkit(options)
    return result


def _run_plasmidkit(options: ConfigType) -> int:
    """ The real run_plasmidkit, assumes logging is set up around it """
    logging.debug("plasmidkit version: %s", __version__)
    command = COMMANDS.get(options.command)
    if command is None:
        raise ValueError(f"unknown command: {options.command}")
    try:
        return command(options)
    except PlasmidkitError as err:
        logging.error(str(err))
        return 1
