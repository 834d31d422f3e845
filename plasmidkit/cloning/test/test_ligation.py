# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

# for test files, silence irrelevant and noisy pylint warnings
# pylint: disable=no-self-use,protected-access,missing-docstring

import unittest

from plasmidkit.cloning import ligation
from plasmidkit.cloning.digest import simulate_digest
from plasmidkit.cloning.restriction import with_restriction_sites
from plasmidkit.common.model import DNASequence, Fragment, SequenceFeature

TWO_SITES = "AAAGAATTCAAAGGATCCAA"


def build(sequence, circular=False, features=None):
    return with_restriction_sites(DNASequence("test", sequence, circular=circular, features=features or []))


def feature_coordinates(record):
    return [(feature.name, feature.start, feature.end) for feature in record.features]


class TestLigation(unittest.TestCase):
    def test_simple_fragments(self):
        fragments = [
            Fragment("AAAA", 1, 4, [SequenceFeature("a", "CDS", 2, 3)]),
            Fragment("CCCC", 1, 4, [SequenceFeature("c", "CDS", 1, 4)]),
        ]
        product = ligation.simulate_ligation(fragments, circular=True)
        assert product.sequence == "AAAACCCC"
        assert product.length == 8
        assert product.circular
        assert product.name == ligation.DEFAULT_LIGATION_NAME
        assert feature_coordinates(product) == [("a", 2, 3), ("c", 5, 8)]

    def test_fresh_ids(self):
        feature = SequenceFeature("a", "CDS", 2, 3)
        product = ligation.simulate_ligation([Fragment("AAAA", 1, 4, [feature])], circular=False)
        assert product.features[0].id != feature.id
        # the fragment's feature is untouched
        assert (feature.start, feature.end) == (2, 3)

    def test_empty(self):
        product = ligation.simulate_ligation([], circular=False, name="nothing")
        assert product.name == "nothing"
        assert product.sequence == ""
        assert product.features == []

    def test_no_sites_or_primers(self):
        product = ligation.simulate_ligation(simulate_digest(build(TWO_SITES), ["EcoRI"]), circular=False)
        assert product.restriction_sites == []
        assert product.primers == []

    def test_linear_reconstruction(self):
        features = [
            SequenceFeature("start", "CDS", 1, 3),
            SequenceFeature("middle", "promoter", 6, 10),
            SequenceFeature("end", "terminator", 15, 19),
        ]
        record = build(TWO_SITES, features=features)
        fragments = simulate_digest(record, ["EcoRI", "BamHI"])
        product = ligation.simulate_ligation(fragments, circular=False)
        assert product.sequence == record.sequence
        assert feature_coordinates(product) == feature_coordinates(record)

    def test_circular_is_rotation(self):
        record = build(TWO_SITES, circular=True, features=[SequenceFeature("middle", "CDS", 6, 10),
                                                           SequenceFeature("over", "CDS", 16, 2)])
        fragments = simulate_digest(record, ["EcoRI", "BamHI"])
        product = ligation.simulate_ligation(fragments, circular=True)
        # the product starts at the first cut
        assert product.sequence == TWO_SITES[4:] + TWO_SITES[:4]
        assert product.length == record.length
        assert feature_coordinates(product) == [("middle", 2, 6), ("over", 12, 18)]

    def test_swapped_order(self):
        record = build(TWO_SITES, features=[SequenceFeature("tail", "CDS", 15, 18)])
        fragments = simulate_digest(record, ["BamHI"])
        assert len(fragments) == 2
        product = ligation.simulate_ligation([fragments[1], fragments[0]], circular=False)
        assert product.sequence == TWO_SITES[13:] + TWO_SITES[:13]
        # 15..18 is 2..5 of the second fragment, which is now first
        assert feature_coordinates(product) == [("tail", 2, 5)]


class TestFeaturesSpanningCuts(unittest.TestCase):
    def check_bounds(self, product):
        for feature in product.features:
            assert 1 <= feature.start <= product.length
            assert 1 <= feature.end <= product.length

    def test_linear_single_cut(self):
        record = build(TWO_SITES, features=[SequenceFeature("span", "CDS", 2, 8)])
        fragments = simulate_digest(record, ["EcoRI"])
        assert len(fragments) == 2
        product = ligation.simulate_ligation(fragments, circular=False)
        assert feature_coordinates(product) == [("span", 2, 8)]

    def test_linear_both_cuts(self):
        record = build(TWO_SITES, features=[SequenceFeature("mcs", "misc_feature", 2, 16)])
        fragments = simulate_digest(record, ["EcoRI", "BamHI"])
        assert len(fragments) == 3
        product = ligation.simulate_ligation(fragments, circular=False)
        assert feature_coordinates(product) == [("mcs", 2, 16)]

    def test_circular_rotation(self):
        record = build(TWO_SITES, circular=True, features=[SequenceFeature("span", "CDS", 2, 8)])
        fragments = simulate_digest(record, ["EcoRI", "BamHI"])
        product = ligation.simulate_ligation(fragments, circular=True)
        assert product.sequence == TWO_SITES[4:] + TWO_SITES[:4]
        # 2..8 of the original, moved 4 bases back, now wraps the origin
        assert feature_coordinates(product) == [("span", 18, 4)]
        self.check_bounds(product)

    def test_single_fragment_clipped(self):
        record = build(TWO_SITES, features=[SequenceFeature("mcs", "misc_feature", 2, 16)])
        fragments = simulate_digest(record, ["EcoRI", "BamHI"])
        product = ligation.simulate_ligation([fragments[1]], circular=False)
        assert product.sequence == TWO_SITES[4:13]
        assert feature_coordinates(product) == [("mcs", 1, 9)]

    def test_swapped_order(self):
        record = build(TWO_SITES, features=[SequenceFeature("span", "CDS", 10, 16)])
        fragments = simulate_digest(record, ["BamHI"])
        swapped = [fragments[1], fragments[0]]
        # the two parts of the feature are no longer joined in a linear product
        linear = ligation.simulate_ligation(swapped, circular=False)
        assert feature_coordinates(linear) == [("span", 1, 3), ("span", 17, 20)]
        self.check_bounds(linear)
        # but they are across the origin of a circular product
        circular = ligation.simulate_ligation(swapped, circular=True)
        assert feature_coordinates(circular) == [("span", 17, 3)]

    def test_duplicates_dropped(self):
        features = [SequenceFeature("a", "CDS", 2, 3), SequenceFeature("a", "CDS", 2, 3),
                    SequenceFeature("a", "promoter", 2, 3)]
        record = build(TWO_SITES, features=features)
        product = ligation.simulate_ligation(simulate_digest(record, ["EcoRI"]), circular=False)
        assert [(feature.type, feature.start, feature.end) for feature in product.features] == [
            ("CDS", 2, 3), ("promoter", 2, 3)]

    def test_wrapping_feature_uncut(self):
        record = build("ACGTACGTAC", circular=True, features=[SequenceFeature("over", "CDS", 9, 2)])
        fragments = simulate_digest(record, ["EcoRI"])
        assert len(fragments) == 1
        product = ligation.simulate_ligation(fragments, circular=True)
        assert feature_coordinates(product) == [("over", 9, 2)]
        # as a linear molecule, the feature can't cross the ends
        linear = ligation.simulate_ligation(fragments, circular=False)
        assert feature_coordinates(linear) == [("over", 1, 2), ("over", 9, 10)]
