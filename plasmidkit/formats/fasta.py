# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A collection of functions supporting the FASTA format
"""

import logging
from typing import List, Optional, Tuple

from plasmidkit.cloning.restriction import find_restriction_sites
from plasmidkit.common.model import DEFAULT_NAME, DNASequence

LINE_WIDTH = 70


def _split_header(header: str) -> Tuple[str, Optional[str]]:
    """ Splits a header line, without the leading '>', into name and description """
    parts = header.strip().split(None, 1)
    name = parts[0] if parts else ""
    description = parts[1].strip() if len(parts) > 1 else ""
    return name or DEFAULT_NAME, description or None


def _build_record(header: Optional[str], lines: List[str]) -> DNASequence:
    name, description = _split_header(header) if header is not None else (DEFAULT_NAME, None)
    sequence = "".join("".join(line.split()) for line in lines)
    return DNASequence(
        name=name,
        sequence=sequence,
        circular=False,
        description=description,
        restriction_sites=find_restriction_sites(sequence),
    )


def _split_records(text: str) -> List[Tuple[Optional[str], List[str]]]:
    """ Groups the lines of FASTA text into header and sequence line pairs.
        Sequence lines before any header form a record without a header.
    """
    records: List[Tuple[Optional[str], List[str]]] = []
    header: Optional[str] = None
    lines: List[str] = []
    started = False
    for line in text.strip().splitlines():
        if line.startswith(">"):
            if started:
                records.append((header, lines))
            header = line[1:]
            lines = []
            started = True
            continue
        lines.append(line)
        started = True
    if started:
        records.append((header, lines))
    return records


def parse_fasta(text: str) -> DNASequence:
    """ Parses FASTA text into a linear DNASequence.

        The first word of the header is taken as the name, the remainder as
        the description. Only the first record is used if multiple are present.
        Restriction sites are calculated for the common enzyme panel.

        Arguments:
            text: the FASTA content

        Returns:
            a new DNASequence
    """
    records = _split_records(text)
    if not records:
        logging.debug("FASTA content contains no records")
        return _build_record(None, [])
    if len(records) > 1:
        logging.debug("FASTA content contains %d records, using only the first", len(records))
    return _build_record(*records[0])


def parse_multi_fasta(text: str) -> List[DNASequence]:
    """ Parses all records in FASTA text, each as with parse_fasta() """
    return [_build_record(header, lines) for header, lines in _split_records(text)]


def export_fasta(record: DNASequence, line_width: int = LINE_WIDTH) -> str:
    """ Converts a record to FASTA text

        Arguments:
            record: the DNASequence to convert
            line_width: the maximum number of bases per line

        Returns:
            the FASTA text, with a trailing newline
    """
    header = f">{record.name}"
    if record.description:
        header += f" {record.description}"
    lines = [header]
    for i in range(0, len(record.sequence), line_width):
        lines.append(record.sequence[i:i + line_width])
    return "\n".join(lines) + "\n"


def export_multi_fasta(records: List[DNASequence]) -> str:
    """ Converts multiple records into a single block of FASTA text """
    return "".join(export_fasta(record) for record in records)
