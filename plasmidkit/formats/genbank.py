# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A lightweight reader and writer for GenBank flat files.

    Only the fields relevant to plasmid maps are handled: the locus name and
    topology, accession, definition, source organism, a simplified feature
    table, and the sequence itself. Only the first record in a file is read.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
import re
from typing import List, Optional, Tuple

from plasmidkit.cloning.restriction import find_restriction_sites
from plasmidkit.common.errors import FormatError, FormatErrorKind
from plasmidkit.common.model import (
    DEFAULT_NAME,
    DNASequence,
    Direction,
    SequenceFeature,
    get_color_for_feature_type,
)

# feature keys are indented by 5 columns, qualifiers and continuations by 21
_QUALIFIER_COLUMN = 21
_FEATURE_KEY_PATTERN = re.compile(r"^\s+(\w\S*)\s*(.*)$")
_QUALIFIER_PATTERN = re.compile(r"^\s+/(\w+)(?:=(.*))?$")
_RANGE_PATTERN = re.compile(r"(\d+)\s*(?:\.\.|\^)\s*(\d+)")
_SINGLE_POSITION_PATTERN = re.compile(r"^\d+$")
_SEQUENCE_JUNK = re.compile(r"[\d\s]+")

SEQUENCE_LINE_WIDTH = 60
SEQUENCE_GROUP_WIDTH = 10


@dataclass
class _PendingFeature:
    """ A feature from the feature table that hasn't been completed yet """
    type: str
    location: str
    qualifiers: List[List[str]] = field(default_factory=list)

    def add_continuation(self, text: str) -> None:
        """ Extends the last qualifier value, or the location if no qualifiers
            have been read yet
        """
        if self.qualifiers:
            key, value = self.qualifiers[-1]
            joiner = "" if key == "translation" else " "
            self.qualifiers[-1][1] = f"{value}{joiner}{text}" if value else text
        else:
            self.location += text


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
        if value.endswith('"'):
            value = value[:-1]
    return value


def parse_location(location: str) -> Optional[Tuple[int, int, Direction]]:
    """ Interprets a GenBank location string.

        Joined locations are reduced to the start of the first part and the end
        of the last part, which gives a start after the end for locations
        wrapping the origin. Partial markers ('<' and '>') are ignored.

        Arguments:
            location: the location text, e.g. "complement(10..20)"

        Returns:
            a tuple of start, end, and direction, or None if the location has
            no coordinates at all
    """
    text = location.replace("<", "").replace(">", "").strip()
    if not any(char.isdigit() for char in text):
        return None
    direction = Direction.REVERSE if "complement" in text else Direction.FORWARD
    ranges = _RANGE_PATTERN.findall(text)
    if ranges:
        return int(ranges[0][0]), int(ranges[-1][1]), direction
    # a single base, possibly within complement()
    bare = re.sub(r"^complement\((.*)\)$", r"\1", text)
    if _SINGLE_POSITION_PATTERN.match(bare):
        position = int(bare)
        return position, position, direction
    raise FormatError(FormatErrorKind.MALFORMED_LOCATION, location)


def _complete_feature(pending: Optional[_PendingFeature]) -> Optional[SequenceFeature]:
    """ Converts a pending feature into a SequenceFeature, or None if it lacks
        a type or coordinates
    """
    if pending is None or not pending.type:
        return None
    location = parse_location(pending.location)
    if location is None:
        logging.debug("Dropping incomplete GenBank feature of type %s", pending.type)
        return None
    start, end, direction = location
    name = ""
    notes = None
    for key, value in pending.qualifiers:
        if key in ("label", "gene"):
            name = _strip_quotes(value)
        elif key == "note":
            notes = _strip_quotes(value)
    return SequenceFeature(
        name=name or pending.type,
        type=pending.type,
        start=start,
        end=end,
        direction=direction,
        color=get_color_for_feature_type(pending.type),
        notes=notes,
    )


def _continuation_lines(lines: List[str], index: int) -> List[str]:
    """ Collects the indented lines following a header keyword line """
    continued = []
    for line in lines[index + 1:]:
        if not line.startswith(" "):
            break
        continued.append(line.strip())
    return continued


def parse_genbank(text: str) -> DNASequence:
    """ Parses a GenBank record into a DNASequence.

        The record is considered circular only if the LOCUS line contains
        "circular". Restriction sites are calculated for the common enzyme panel.

        Arguments:
            text: the GenBank content

        Returns:
            a new DNASequence
    """
    lines = text.strip().splitlines()
    name = ""
    description = ""
    organism = ""
    accession = ""
    circular = False
    features: List[SequenceFeature] = []
    sequence_parts: List[str] = []

    in_features = False
    in_sequence = False
    pending: Optional[_PendingFeature] = None

    def flush() -> None:
        nonlocal pending
        feature = _complete_feature(pending)
        if feature is not None:
            features.append(feature)
        pending = None

    for index, line in enumerate(lines):
        line = line.rstrip("\r")
        stripped = line.strip()

        if stripped.startswith("//"):
            break

        if in_sequence:
            sequence_parts.append(_SEQUENCE_JUNK.sub("", line))
            continue

        if line.startswith("ORIGIN"):
            flush()
            in_features = False
            in_sequence = True
            continue

        if in_features and line.startswith(" "):
            qualifier = _QUALIFIER_PATTERN.match(line)
            indent = len(line) - len(line.lstrip())
            if qualifier:
                if pending is not None:
                    pending.qualifiers.append([qualifier.group(1), qualifier.group(2) or ""])
            elif indent < _QUALIFIER_COLUMN and _FEATURE_KEY_PATTERN.match(line):
                flush()
                match = _FEATURE_KEY_PATTERN.match(line)
                assert match
                pending = _PendingFeature(match.group(1), match.group(2).strip())
            elif pending is not None:
                pending.add_continuation(stripped)
            continue

        if line.startswith("LOCUS"):
            parts = line.split()
            if len(parts) > 1:
                name = parts[1]
            circular = "circular" in line
        elif line.startswith("ACCESSION"):
            parts = line.split()
            if len(parts) > 1:
                accession = parts[1]
        elif line.startswith("DEFINITION"):
            description = " ".join([line[len("DEFINITION"):].strip()] + _continuation_lines(lines, index)).strip()
            # the terminating period is added on export
            if description.endswith("."):
                description = description[:-1]
        elif line.startswith("SOURCE"):
            organism = line[len("SOURCE"):].strip()
            for continued in _continuation_lines(lines, index):
                if continued.startswith("ORGANISM"):
                    organism = continued[len("ORGANISM"):].strip()
                    break
        elif line.startswith("FEATURES"):
            in_features = True
        elif not line.startswith(" "):
            # any other top level keyword ends the feature table
            flush()
            in_features = False

    flush()

    sequence = "".join(sequence_parts)
    logging.debug("Read GenBank record %s with %d features and %d bases", name, len(features), len(sequence))
    return DNASequence(
        name=name or DEFAULT_NAME,
        sequence=sequence,
        circular=circular,
        features=features,
        restriction_sites=find_restriction_sites(sequence),
        description=description or None,
        organism=organism or None,
        accession=accession or None,
    )


def _format_location(feature: SequenceFeature, length: int) -> str:
    if feature.wraps_origin():
        location = f"join({feature.start}..{length},1..{feature.end})"
    else:
        location = f"{feature.start}..{feature.end}"
    if feature.direction == Direction.REVERSE:
        location = f"complement({location})"
    return location


def _format_sequence(sequence: str) -> List[str]:
    lines = []
    for i in range(0, len(sequence), SEQUENCE_LINE_WIDTH):
        chunk = sequence[i:i + SEQUENCE_LINE_WIDTH]
        groups = [chunk[j:j + SEQUENCE_GROUP_WIDTH] for j in range(0, len(chunk), SEQUENCE_GROUP_WIDTH)]
        lines.append(f"{i + 1:>9} {' '.join(groups)}")
    return lines


def export_genbank(record: DNASequence, date: Optional[datetime] = None) -> str:
    """ Converts a record to GenBank text

        Arguments:
            record: the DNASequence to convert
            date: the date to use in the LOCUS line, defaults to today

        Returns:
            the GenBank text, with a trailing newline
    """
    date_text = (date or datetime.now()).strftime("%Y%m%d")
    topology = "circular" if record.circular else "linear"
    organism = record.organism or "Unknown"
    lines = [
        f"LOCUS       {record.name:<16} {record.length} bp    DNA     {topology}   {record.organism or 'SYN'} {date_text}",
        f"DEFINITION  {record.description or record.name}.",
        f"ACCESSION   {record.accession or 'UNKNOWN'}",
        "VERSION     UNKNOWN",
        f"SOURCE      {organism}",
        f"  ORGANISM  {organism}",
        "            Unclassified.",
        "FEATURES             Location/Qualifiers",
    ]
    for feature in record.features:
        lines.append(f"     {feature.type:<16} {_format_location(feature, record.length)}")
        lines.append(f'                     /label="{feature.name}"')
        if feature.notes:
            notes = " ".join(feature.notes.splitlines())
            lines.append(f'                     /note="{notes}"')
    lines.append("ORIGIN")
    lines.extend(_format_sequence(record.sequence))
    lines.append("//")
    return "\n".join(lines) + "\n"
