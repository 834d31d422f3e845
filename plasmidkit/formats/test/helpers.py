# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Helpers for constructing SnapGene files in memory for tests """

import struct
from typing import Iterable, Tuple

from plasmidkit.formats import snapgene

# the cookie packet payload of real files: the magic, file type, and versions
COOKIE_PAYLOAD = b"SnapGene" + struct.pack(">HHH", 1, 15, 19)


def build_packet(packet_type: int, payload: bytes) -> bytes:
    """ Builds a single packet, with type, big-endian length, and payload """
    return struct.pack(">BI", packet_type, len(payload)) + payload


def build_file(packets: Iterable[Tuple[int, bytes]], cookie: bytes = COOKIE_PAYLOAD) -> bytes:
    """ Builds a full SnapGene file from the given packets, prefixed with a
        cookie packet
    """
    data = build_packet(snapgene.COOKIE_PACKET, cookie)
    for packet_type, payload in packets:
        data += build_packet(packet_type, payload)
    return data


def sequence_packet(sequence: str, circular: bool = False) -> Tuple[int, bytes]:
    """ Builds a DNA packet, with topology flags """
    flags = 0x01 if circular else 0x00
    return snapgene.SEQUENCE_PACKET, bytes([flags]) + sequence.encode("ascii")


def notes_packet(xml: str) -> Tuple[int, bytes]:
    return snapgene.NOTES_PACKET, xml.encode("utf-8")


def features_packet(xml: str) -> Tuple[int, bytes]:
    return snapgene.FEATURES_PACKET, xml.encode("utf-8")


def primers_packet(xml: str) -> Tuple[int, bytes]:
    return snapgene.PRIMERS_PACKET, xml.encode("utf-8")


SAMPLE_SEQUENCE = "ATGAAAGAATTCGGATCCTAA" + "ACGT" * 20

SAMPLE_NOTES = """<Notes>
<Type>Synthetic</Type>
<LastModified>2023.5.17</LastModified>
<Created>2020.1.2</Created>
<AccessionNumber>AB123456</AccessionNumber>
<Comments>pSample cloning vector</Comments>
</Notes>"""

SAMPLE_FEATURES = """<Features nextValidID="3">
<Feature recentID="0" name="insert" directionality="1" type="CDS">
<Segment range="1-21" color="#993366" type="standard"/>
<Q name="gene"><V text="ins"/></Q>
<Q name="codon_start"><V int="1"/></Q>
</Feature>
<Feature recentID="1" name="split" directionality="2" type="misc_feature">
<Segment range="30-40" type="standard"/>
<Segment range="41-44" type="gap"/>
<Segment range="45-60" type="standard"/>
</Feature>
<Feature recentID="2" name="no type">
<Segment range="70-80" type="standard"/>
</Feature>
</Features>"""

SAMPLE_PRIMERS = """<Primers nextValidID="2">
<Primer recentID="0" name="fwd" sequence="ATGAAAGAATTC">
<BindingSite location="3-14" boundStrand="0"/>
</Primer>
<Primer recentID="1" name="rev_no_sequence">
<BindingSite location="50-59" boundStrand="1"/>
</Primer>
</Primers>"""


def build_sample_file(circular: bool = True) -> bytes:
    """ Builds a SnapGene file with one of each handled packet type """
    return build_file([
        sequence_packet(SAMPLE_SEQUENCE, circular=circular),
        notes_packet(SAMPLE_NOTES),
        features_packet(SAMPLE_FEATURES),
        primers_packet(SAMPLE_PRIMERS),
    ])
