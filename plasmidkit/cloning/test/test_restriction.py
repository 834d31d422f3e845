# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=no-self-use,protected-access,missing-docstring

import unittest

from plasmidkit.cloning import restriction
from plasmidkit.cloning.enzymes import Enzyme
from plasmidkit.common.model import DNASequence, Direction, Primer, SequenceFeature


def summarise(sites):
    return [(site.name, site.start, site.end) for site in sites]


class TestFindSites(unittest.TestCase):
    def test_single(self):
        sites = restriction.find_restriction_sites("AAAGAATTCAAA")
        assert summarise(sites) == [("EcoRI", 4, 9)]
        site = sites[0]
        assert site.sequence == "GAATTC"
        assert site.cut_site == 1
        assert site.cut_position == 4

    def test_case_insensitive(self):
        assert summarise(restriction.find_restriction_sites("aaagaattcaaa")) == [("EcoRI", 4, 9)]

    def test_none(self):
        assert restriction.find_restriction_sites("AAAAAAAAAA") == []
        assert restriction.find_restriction_sites("") == []

    def test_panel_order(self):
        sequence = "GGATCCAAGAATTCAAGGATCC"
        assert summarise(restriction.find_restriction_sites(sequence)) == [
            ("EcoRI", 9, 14),
            ("BamHI", 1, 6),
            ("BamHI", 17, 22),
        ]

    def test_non_overlapping(self):
        enzyme = Enzyme("Test", "AA", 1)
        assert summarise(restriction.find_restriction_sites("AAAAA", [enzyme])) == [
            ("Test", 1, 2),
            ("Test", 3, 4),
        ]

    def test_mappings(self):
        enzymes = [
            {"name": "Camel", "sequence": "GGCC", "cutSite": 2},
            {"name": "Snake", "sequence": "ggcc", "cut_site": 3},
            {"name": "Empty", "sequence": ""},
        ]
        sites = restriction.find_restriction_sites("AAGGCCAA", enzymes)
        assert summarise(sites) == [("Camel", 3, 6), ("Snake", 3, 6)]
        assert [site.cut_position for site in sites] == [4, 5]

    def test_origin_not_scanned(self):
        # a site spanning the origin of a circular sequence is not found
        assert restriction.find_restriction_sites("ATTCAAAAGA") == []


class TestHelpers(unittest.TestCase):
    def test_counts(self):
        sites = restriction.find_restriction_sites("GGATCCAAGAATTCAAGGATCC")
        assert restriction.count_sites_by_enzyme(sites) == {"EcoRI": 1, "BamHI": 2}
        assert restriction.count_sites_by_enzyme([]) == {}

    def test_with_sites(self):
        record = DNASequence("test", "AAAGAATTCAAA")
        assert not record.restriction_sites
        updated = restriction.with_restriction_sites(record)
        assert summarise(updated.restriction_sites) == [("EcoRI", 4, 9)]
        # the original is untouched
        assert not record.restriction_sites
        assert updated.id == record.id

    def test_with_sites_custom(self):
        record = DNASequence("test", "AAAGAATTCAAA")
        updated = restriction.with_restriction_sites(record, [Enzyme("Test", "AAA", 1)])
        assert summarise(updated.restriction_sites) == [("Test", 1, 3), ("Test", 10, 12)]

    def test_with_sites_separate_lists(self):
        feature = SequenceFeature("a", "CDS", 1, 3)
        primer = Primer("p", "AAAG", 1, 4, Direction.FORWARD)
        record = DNASequence("test", "AAAGAATTCAAA", features=[feature], primers=[primer])
        updated = restriction.with_restriction_sites(record)
        updated.features.append(SequenceFeature("b", "CDS", 4, 9))
        updated.primers.clear()
        assert record.features == [feature]
        assert record.primers == [primer]
        assert updated.features[0] is feature
