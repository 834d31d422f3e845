# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=no-self-use,protected-access,missing-docstring

from datetime import datetime
import logging
import os
import unittest

from helperlibs.wrappers.io import TemporaryDirectory
import pytest

from plasmidkit.common.errors import FormatError, FormatErrorKind
from plasmidkit.common.model import Direction
from plasmidkit.common.utils import calculate_gc_content, calculate_melting_temperature
from plasmidkit.formats import snapgene
from plasmidkit.formats.test import helpers


class TestPackets(unittest.TestCase):
    def test_cookie_skipped(self):
        data = helpers.build_file([(0x99, b"abc"), (0x00, b"\x00AC")])
        assert list(snapgene.iter_packets(data)) == [(0x99, b"abc"), (0x00, b"\x00AC")]

    def test_too_short(self):
        for data in [b"", b"\x09\x00"]:
            with self.assertRaises(FormatError) as context:
                list(snapgene.iter_packets(data))
            assert context.exception.kind == FormatErrorKind.INVALID_MAGIC

    def test_wrong_first_packet(self):
        data = helpers.build_packet(0x00, b"SnapGene")
        with self.assertRaises(FormatError) as context:
            list(snapgene.iter_packets(data))
        assert context.exception.kind == FormatErrorKind.INVALID_MAGIC

    def test_wrong_cookie(self):
        with self.assertRaises(FormatError) as context:
            list(snapgene.iter_packets(helpers.build_file([], cookie=b"GeneSnap")))
        assert context.exception.kind == FormatErrorKind.INVALID_MAGIC

    def test_short_cookie(self):
        with self.assertRaises(FormatError) as context:
            list(snapgene.iter_packets(helpers.build_file([], cookie=b"Snap")))
        assert context.exception.kind == FormatErrorKind.INVALID_MAGIC

    def test_minimal_cookie(self):
        data = helpers.build_file([helpers.sequence_packet("ACGT")], cookie=b"SnapGene")
        assert len(list(snapgene.iter_packets(data))) == 1

    def test_truncated_payload(self):
        data = helpers.build_file([]) + helpers.build_packet(0x00, b"\x00ACGT")[:-2]
        with self.assertRaises(FormatError) as context:
            list(snapgene.iter_packets(data))
        assert context.exception.kind == FormatErrorKind.MALFORMED_PACKET

    def test_truncated_header(self):
        data = helpers.build_file([]) + b"\x00\x00"
        with self.assertRaises(FormatError) as context:
            list(snapgene.iter_packets(data))
        assert context.exception.kind == FormatErrorKind.MALFORMED_PACKET


class TestParsing(unittest.TestCase):
    @pytest.fixture(autouse=True)
    def inject_fixtures(self, caplog):
        self.caplog = caplog  # pylint: disable=attribute-defined-outside-init

    def test_minimal(self):
        record = snapgene.parse_snapgene(helpers.build_file([helpers.sequence_packet("ACGT", circular=True)]))
        assert record.sequence == "ACGT"
        assert record.length == 4
        assert record.circular
        assert record.name == ""
        assert record.features == []
        assert record.restriction_sites == []

    def test_linear_flag(self):
        record = snapgene.parse_snapgene(helpers.build_file([helpers.sequence_packet("ACGT")]))
        assert not record.circular

    def test_other_flag_bits_ignored(self):
        data = helpers.build_file([(snapgene.SEQUENCE_PACKET, b"\x02ACGT")])
        assert not snapgene.parse_snapgene(data).circular
        data = helpers.build_file([(snapgene.SEQUENCE_PACKET, b"\x03ACGT")])
        assert snapgene.parse_snapgene(data).circular

    def test_missing_sequence(self):
        for packets in [[], [helpers.notes_packet(helpers.SAMPLE_NOTES)], [helpers.sequence_packet("")]]:
            with self.assertRaises(FormatError) as context:
                snapgene.parse_snapgene(helpers.build_file(packets))
            assert context.exception.kind == FormatErrorKind.MISSING_SEQUENCE

    def test_empty_sequence_packet(self):
        with self.assertRaises(FormatError) as context:
            snapgene.parse_snapgene(helpers.build_file([(snapgene.SEQUENCE_PACKET, b"")]))
        assert context.exception.kind == FormatErrorKind.MALFORMED_PACKET

    def test_duplicate_sequence(self):
        data = helpers.build_file([helpers.sequence_packet("ACGT"), helpers.sequence_packet("GGGG")])
        with self.assertRaises(FormatError) as context:
            snapgene.parse_snapgene(data)
        assert context.exception.kind == FormatErrorKind.DUPLICATE_PACKET

    def test_malformed_xml(self):
        for packet in [helpers.notes_packet("<Notes><Type>"), helpers.features_packet("<Features"),
                       helpers.primers_packet("not xml")]:
            data = helpers.build_file([helpers.sequence_packet("ACGT"), packet])
            with self.assertRaises(FormatError) as context:
                snapgene.parse_snapgene(data)
            assert context.exception.kind == FormatErrorKind.MALFORMED_XML

    def test_unknown_packets_skipped(self):
        self.caplog.set_level(logging.DEBUG)
        data = helpers.build_file([(0x08, b"\x01\x02\x03"), helpers.sequence_packet("ACGT"), (0x11, b"")])
        record = snapgene.parse_snapgene(data)
        assert record.sequence == "ACGT"
        assert "Skipping unhandled SnapGene packet type 0x08" in self.caplog.text

    def test_packet_order_irrelevant(self):
        data = helpers.build_file([helpers.features_packet(helpers.SAMPLE_FEATURES),
                                   helpers.sequence_packet(helpers.SAMPLE_SEQUENCE)])
        record = snapgene.parse_snapgene(data)
        assert len(record.features) == 3


class TestSample(unittest.TestCase):
    def setUp(self):
        self.record = snapgene.parse_snapgene(helpers.build_sample_file())

    def test_sequence(self):
        assert self.record.sequence == helpers.SAMPLE_SEQUENCE
        assert self.record.length == len(helpers.SAMPLE_SEQUENCE)
        assert self.record.circular

    def test_notes(self):
        assert self.record.name == "pSample"
        assert self.record.description == "pSample cloning vector"
        assert self.record.category == "Synthetic"
        assert self.record.accession == "AB123456"
        assert self.record.id == "AB123456"
        assert self.record.created_at == datetime(2020, 1, 2)
        assert self.record.updated_at == datetime(2023, 5, 17)

    def test_unknown_category(self):
        notes = helpers.SAMPLE_NOTES.replace("Synthetic", "Natural")
        data = helpers.build_file([helpers.sequence_packet("ACGT"), helpers.notes_packet(notes)])
        assert snapgene.parse_snapgene(data).category == "Unknown"

    def test_features(self):
        insert, split, untyped = self.record.features[:3]
        assert (insert.name, insert.type, insert.start, insert.end) == ("insert", "CDS", 1, 21)
        assert insert.direction == Direction.FORWARD
        assert insert.color == "#FF5252"
        assert insert.notes == "gene: ins\ncodon_start: 1"

        # gap segments are ignored, the rest reduced to outer bounds
        assert (split.start, split.end) == (30, 60)
        assert split.direction == Direction.REVERSE
        assert split.notes is None

        assert untyped.type == "misc_feature"
        assert (untyped.start, untyped.end) == (70, 80)

    def test_primer_features(self):
        primer_features = self.record.get_features_by_type("primer_bind")
        assert len(primer_features) == 2
        fwd, rev = primer_features
        assert (fwd.name, fwd.start, fwd.end, fwd.direction) == ("fwd", 3, 15, Direction.FORWARD)
        assert (rev.name, rev.start, rev.end, rev.direction) == ("rev_no_sequence", 50, 60, Direction.REVERSE)
        assert fwd.color == "#FF9800"

    def test_primers(self):
        # only primers with a sequence are recorded as primers
        assert len(self.record.primers) == 1
        primer = self.record.primers[0]
        assert primer.name == "fwd"
        assert primer.sequence == "ATGAAAGAATTC"
        assert primer.melting_temp == calculate_melting_temperature("ATGAAAGAATTC")
        assert primer.gc_content == calculate_gc_content("ATGAAAGAATTC")

    def test_fresh_ids(self):
        ids = {feature.id for feature in self.record.features}
        assert len(ids) == len(self.record.features)
        again = snapgene.parse_snapgene(helpers.build_sample_file())
        assert not ids.intersection(feature.id for feature in again.features)

    def test_invalid_ranges_skipped(self):
        features = """<Features>
        <Feature name="bad" type="CDS"><Segment range="a-b"/></Feature>
        <Feature name="good" type="CDS"><Segment range="2-3"/></Feature>
        </Features>"""
        data = helpers.build_file([helpers.sequence_packet("ACGT"), helpers.features_packet(features)])
        record = snapgene.parse_snapgene(data)
        assert [feature.name for feature in record.features] == ["good"]


class TestFiles(unittest.TestCase):
    def test_named_from_notes(self):
        with TemporaryDirectory() as temp_dir:
            filename = os.path.join(temp_dir, "vector.dna")
            with open(filename, "wb") as handle:
                handle.write(helpers.build_sample_file())
            record = snapgene.parse_snapgene_file(filename)
        assert record.name == "pSample"

    def test_named_from_file(self):
        with TemporaryDirectory() as temp_dir:
            filename = os.path.join(temp_dir, "vector.dna")
            with open(filename, "wb") as handle:
                handle.write(helpers.build_file([helpers.sequence_packet("ACGT")]))
            record = snapgene.parse_snapgene_file(filename)
        assert record.name == "vector"
