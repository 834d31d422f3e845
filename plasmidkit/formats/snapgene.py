# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Decodes SnapGene binary files into DNASequence records.

    A SnapGene file is a stream of packets, each consisting of a single type
    byte, a big-endian 32-bit payload length, and the payload itself. The
    first packet is always a cookie identifying the file type. Sequence data
    is held in a raw packet, while notes, features, and primers are held as
    XML documents.

    Packet types without a handler are skipped, so newer files remain readable.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
import os
import struct
from typing import Callable, Dict, Iterator, List, Optional, Tuple
import xml.etree.ElementTree as ET

from plasmidkit.common.errors import FormatError, FormatErrorKind
from plasmidkit.common.model import (
    DNASequence,
    Direction,
    Primer,
    SequenceFeature,
    get_color_for_feature_type,
)
from plasmidkit.common.utils import calculate_gc_content, calculate_melting_temperature

SNAPGENE_EXTENSION = ".dna"

COOKIE_PACKET = 0x09
COOKIE = b"SnapGene"
SEQUENCE_PACKET = 0x00
PRIMERS_PACKET = 0x05
NOTES_PACKET = 0x06
FEATURES_PACKET = 0x0A

_HEADER = struct.Struct(">BI")


@dataclass
class _RecordState:
    """ The pieces of a record gathered while reading packets, local to a
        single parse
    """
    sequence: Optional[str] = None
    circular: bool = False
    name: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    accession: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    features: List[SequenceFeature] = field(default_factory=list)
    primers: List[Primer] = field(default_factory=list)


def iter_packets(data: bytes) -> Iterator[Tuple[int, bytes]]:
    """ Splits a SnapGene byte stream into packets, verifying the initial
        cookie packet

        Arguments:
            data: the full file content

        Returns:
            an iterator of packet type and payload pairs, excluding the cookie
    """
    if len(data) < _HEADER.size:
        raise FormatError(FormatErrorKind.INVALID_MAGIC, "file too short to be a SnapGene file")
    packet_type, length = _HEADER.unpack_from(data, 0)
    offset = _HEADER.size
    if packet_type != COOKIE_PACKET:
        raise FormatError(FormatErrorKind.INVALID_MAGIC, "file does not start with a SnapGene cookie packet")
    if length < len(COOKIE) or data[offset:offset + len(COOKIE)] != COOKIE:
        raise FormatError(FormatErrorKind.INVALID_MAGIC, "file is not a valid SnapGene file")
    offset += length

    while offset < len(data):
        if offset + _HEADER.size > len(data):
            raise FormatError(FormatErrorKind.MALFORMED_PACKET, f"truncated packet header at byte {offset}")
        packet_type, length = _HEADER.unpack_from(data, offset)
        offset += _HEADER.size
        if offset + length > len(data):
            raise FormatError(FormatErrorKind.MALFORMED_PACKET,
                              f"packet of type {packet_type:#04x} runs past the end of the file")
        yield packet_type, data[offset:offset + length]
        offset += length


def _parse_xml(payload: bytes, description: str) -> ET.Element:
    try:
        return ET.fromstring(payload)
    except ET.ParseError as err:
        raise FormatError(FormatErrorKind.MALFORMED_XML, f"{description} packet: {err}") from err


def _parse_range(text: Optional[str]) -> Optional[Tuple[int, int]]:
    """ Converts an "a-b" range into a pair of integers, or None if invalid """
    if not text:
        return None
    first, _, second = text.partition("-")
    try:
        return int(first), int(second)
    except ValueError:
        logging.debug("Skipping invalid SnapGene range: %r", text)
        return None


def _parse_date(text: Optional[str]) -> Optional[datetime]:
    """ Converts a SnapGene "year.month.day" date, or None if invalid """
    if not text:
        return None
    try:
        year, month, day = (int(part) for part in text.strip().split("."))
        return datetime(year, month, day)
    except ValueError:
        logging.debug("Skipping invalid SnapGene date: %r", text)
        return None


def _element_text(root: ET.Element, tag: str) -> Optional[str]:
    element = root if root.tag == tag else root.find(f".//{tag}")
    if element is None or not element.text:
        return None
    return element.text


def _parse_sequence_packet(payload: bytes, state: _RecordState) -> None:
    if state.sequence is not None:
        raise FormatError(FormatErrorKind.DUPLICATE_PACKET, "the file contains more than one DNA packet")
    if not payload:
        raise FormatError(FormatErrorKind.MALFORMED_PACKET, "DNA packet has no topology flags")
    try:
        state.sequence = payload[1:].decode("ascii")
    except UnicodeDecodeError as err:
        raise FormatError(FormatErrorKind.MALFORMED_PACKET, f"DNA packet is not ASCII: {err}") from err
    state.circular = bool(payload[0] & 0x01)


def _parse_notes_packet(payload: bytes, state: _RecordState) -> None:
    root = _parse_xml(payload, "notes")

    category = _element_text(root, "Type")
    if category:
        state.category = "Synthetic" if category == "Synthetic" else "Unknown"

    updated = _parse_date(_element_text(root, "LastModified"))
    if updated:
        state.updated_at = updated
    created = _parse_date(_element_text(root, "Created"))
    if created:
        state.created_at = created

    accession = _element_text(root, "AccessionNumber")
    if accession:
        state.accession = accession

    comments = _element_text(root, "Comments")
    if comments:
        state.name = comments.split(None, 1)[0] if comments.split() else ""
        state.description = comments


def _qualifier_notes(feature: ET.Element) -> Optional[str]:
    """ Flattens feature qualifiers into note text, one qualifier per line """
    lines = []
    for qualifier in feature.iter("Q"):
        name = qualifier.get("name")
        if not name:
            continue
        values = []
        for value in qualifier.iter("V"):
            for attribute in ("text", "predef", "int"):
                if attribute in value.attrib:
                    values.append(value.attrib[attribute])
                    break
        lines.append(f"{name}: {', '.join(values)}")
    return "\n".join(lines) or None


def _parse_features_packet(payload: bytes, state: _RecordState) -> None:
    root = _parse_xml(payload, "features")
    for feature in root.iter("Feature"):
        bounds = []
        for segment in feature.iter("Segment"):
            if segment.get("type") == "gap":
                continue
            segment_range = _parse_range(segment.get("range"))
            if segment_range is None:
                continue
            bounds.append((segment_range[0] - 1, segment_range[1]))
        if not bounds:
            logging.debug("Skipping SnapGene feature without segments: %s", feature.get("name", ""))
            continue
        feature_type = feature.get("type") or "misc_feature"
        direction = Direction.REVERSE if feature.get("directionality") == "2" else Direction.FORWARD
        state.features.append(SequenceFeature(
            name=feature.get("name") or "",
            type=feature_type,
            start=min(start for start, _ in bounds) + 1,
            end=max(end for _, end in bounds),
            direction=direction,
            color=get_color_for_feature_type(feature_type),
            notes=_qualifier_notes(feature),
        ))


def _parse_primers_packet(payload: bytes, state: _RecordState) -> None:
    root = _parse_xml(payload, "primers")
    for primer in root.iter("Primer"):
        name = primer.get("name") or "Primer"
        primer_sequence = primer.get("sequence")
        for site in primer.iter("BindingSite"):
            location = _parse_range(site.get("location"))
            if location is None:
                continue
            start, end = location[0], location[1] + 1
            direction = Direction.REVERSE if site.get("boundStrand") == "1" else Direction.FORWARD
            state.features.append(SequenceFeature(
                name=name,
                type="primer_bind",
                start=start,
                end=end,
                direction=direction,
                color=get_color_for_feature_type("primer_bind"),
            ))
            if primer_sequence:
                state.primers.append(Primer(
                    name=name,
                    sequence=primer_sequence,
                    start=start,
                    end=end,
                    direction=direction,
                    melting_temp=calculate_melting_temperature(primer_sequence),
                    gc_content=calculate_gc_content(primer_sequence),
                ))


PacketHandler = Callable[[bytes, _RecordState], None]

_PACKET_HANDLERS: Dict[int, PacketHandler] = {
    SEQUENCE_PACKET: _parse_sequence_packet,
    PRIMERS_PACKET: _parse_primers_packet,
    NOTES_PACKET: _parse_notes_packet,
    FEATURES_PACKET: _parse_features_packet,
}


def parse_snapgene(data: bytes) -> DNASequence:
    """ Parses the content of a SnapGene file.

        Restriction sites are not calculated.

        Arguments:
            data: the raw bytes of the file

        Returns:
            a new DNASequence
    """
    state = _RecordState()
    for packet_type, payload in iter_packets(data):
        handler = _PACKET_HANDLERS.get(packet_type)
        if handler is None:
            logging.debug("Skipping unhandled SnapGene packet type %#04x of %d bytes", packet_type, len(payload))
            continue
        handler(payload, state)

    if not state.sequence:
        raise FormatError(FormatErrorKind.MISSING_SEQUENCE, "no DNA packet in file")

    now = datetime.now()
    extra = {}
    if state.accession:
        extra["id"] = state.accession
    return DNASequence(
        name=state.name,
        sequence=state.sequence,
        circular=state.circular,
        features=state.features,
        restriction_sites=[],
        primers=state.primers,
        description=state.description,
        category=state.category,
        accession=state.accession,
        created_at=state.created_at or now,
        updated_at=state.updated_at or now,
        **extra,
    )


def parse_snapgene_file(path: str) -> DNASequence:
    """ Reads and parses a SnapGene file. Records without a name in their
        notes are named after the file.
    """
    with open(path, "rb") as handle:
        record = parse_snapgene(handle.read())
    if not record.name:
        record.name = os.path.splitext(os.path.basename(path))[0]
    return record
