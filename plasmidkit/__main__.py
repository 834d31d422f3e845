# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Command line entry point for plasmidkit """

import sys
from typing import List

from plasmidkit import config
from plasmidkit.config import args as config_args
from plasmidkit.main import __version__, run_plasmidkit


def main(args: List[str]) -> int:
    """ Parses the given arguments into the Config singleton and runs the
        requested command

        Arguments:
            args: the command line arguments, excluding the program name

        Returns:
            the exit status of the command
    """
    config_args.PLASMIDKIT_VERSION = __version__
    options = config.build_config(args)
    try:
        return run_plasmidkit(options)
    finally:
        config.destroy_config()


def entrypoint() -> None:
    """ This is needed for the script generated by setuptools. """
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        sys.exit(2)


if __name__ == '__main__':
    entrypoint()
