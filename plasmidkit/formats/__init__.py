# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Readers and writers for the supported sequence file formats, along with
    helpers choosing between them by file extension.
"""

import logging
from typing import Callable, Dict

from plasmidkit.common import json
from plasmidkit.common.errors import PlasmidkitInputError
from plasmidkit.common.model import DNASequence
from plasmidkit.common.path import get_extension

# snapgene has to be imported before the text formats, which rely on the
# cloning package, which in turn relies on snapgene
from .snapgene import SNAPGENE_EXTENSION, iter_packets, parse_snapgene, parse_snapgene_file
from .fasta import export_fasta, export_multi_fasta, parse_fasta, parse_multi_fasta
from .genbank import export_genbank, parse_genbank, parse_location

FASTA_EXTENSIONS = (".fa", ".fasta", ".fna", ".fas")
GENBANK_EXTENSIONS = (".gb", ".gbk", ".genbank")
JSON_EXTENSION = ".json"

_TEXT_READERS: Dict[str, Callable[[str], DNASequence]] = {
    JSON_EXTENSION: json.record_from_json,
}
_TEXT_READERS.update({extension: parse_fasta for extension in FASTA_EXTENSIONS})
_TEXT_READERS.update({extension: parse_genbank for extension in GENBANK_EXTENSIONS})

_WRITERS: Dict[str, Callable[[DNASequence], str]] = {
    JSON_EXTENSION: lambda record: json.dumps(record, indent=True),
}
_WRITERS.update({extension: export_fasta for extension in FASTA_EXTENSIONS})
_WRITERS.update({extension: export_genbank for extension in GENBANK_EXTENSIONS})


def get_supported_read_extensions() -> list:
    """ Returns all file extensions that read_sequence() can handle """
    return sorted([SNAPGENE_EXTENSION] + list(_TEXT_READERS))


def get_supported_write_extensions() -> list:
    """ Returns all file extensions that write_sequence() can handle """
    return sorted(_WRITERS)


def read_sequence(path: str) -> DNASequence:
    """ Reads a sequence file, choosing the format from the file extension.

        Arguments:
            path: the path of the file to read

        Returns:
            the DNASequence read
    """
    extension = get_extension(path)
    if extension == SNAPGENE_EXTENSION:
        return parse_snapgene_file(path)
    reader = _TEXT_READERS.get(extension)
    if reader is None:
        raise PlasmidkitInputError(f"unsupported input file extension {extension!r} for {path}")
    logging.debug("Reading %s as %s", path, extension)
    with open(path, "r", encoding="utf-8") as handle:
        return reader(handle.read())


def write_sequence(record: DNASequence, path: str) -> None:
    """ Writes a sequence to file, choosing the format from the file extension.
        SnapGene output is not supported.

        Arguments:
            record: the DNASequence to write
            path: the path of the file to write
    """
    extension = get_extension(path)
    writer = _WRITERS.get(extension)
    if writer is None:
        raise PlasmidkitInputError(f"unsupported output file extension {extension!r} for {path}")
    logging.debug("Writing %s to %s", record.name, path)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(writer(record))
