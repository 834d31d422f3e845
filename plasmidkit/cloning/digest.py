# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Simulates restriction digests of linear and circular sequences.

    Cuts are made only at the restriction sites already recorded on the
    sequence, so those sites need to be current before digesting.
"""

import logging
from typing import Iterable, List

from plasmidkit.common.errors import ValidationError, ValidationErrorKind
from plasmidkit.common.model import DNASequence, Fragment, RestrictionSite, SequenceFeature

from .enzymes import is_known_enzyme


def _overlapping_features(features: Iterable[SequenceFeature], start: int, end: int) -> List[SequenceFeature]:
    return [feature for feature in features if feature.overlaps(start, end)]


def _validate_enzyme_names(record: DNASequence, enzyme_names: List[str]) -> None:
    if not enzyme_names:
        raise ValidationError(ValidationErrorKind.EMPTY_ENZYME_SELECTION, "no enzymes selected for digest")
    recorded = {site.name for site in record.restriction_sites}
    for name in enzyme_names:
        if name not in recorded and not is_known_enzyme(name):
            raise ValidationError(ValidationErrorKind.UNKNOWN_ENZYME, name)


def get_relevant_sites(record: DNASequence, enzyme_names: Iterable[str]) -> List[RestrictionSite]:
    """ Returns the restriction sites of the record for the given enzymes,
        sorted by start position
    """
    names = set(enzyme_names)
    return sorted((site for site in record.restriction_sites if site.name in names),
                  key=lambda site: site.start)


def simulate_digest(record: DNASequence, enzyme_names: Iterable[str]) -> List[Fragment]:
    """ Cuts a sequence at the sites of the given enzymes.

        A circular sequence cut N times gives N fragments, the last of which
        runs from the final cut through the origin to the first cut. A linear
        sequence cut N times gives N + 1 fragments. Without any cuts, the
        whole sequence is returned as a single fragment.

        Arguments:
            record: the DNASequence to digest, not modified
            enzyme_names: the names of the enzymes to cut with

        Returns:
            a list of Fragments, in order of position, that together cover
            each base of the sequence exactly once
    """
    enzyme_names = list(enzyme_names)
    _validate_enzyme_names(record, enzyme_names)

    sequence = record.sequence
    length = record.length
    sites = get_relevant_sites(record, enzyme_names)
    cuts = [site.cut_position for site in sites if site.cut_position is not None]

    if not cuts:
        logging.debug("No cuts made in %s by %s", record.name, ", ".join(enzyme_names))
        return [Fragment(sequence, 1, length, list(record.features), parent_length=length)]

    fragments = []
    previous = 0
    for cut in cuts:
        if cut > previous:
            fragments.append(Fragment(sequence[previous:cut], previous + 1, cut,
                                      _overlapping_features(record.features, previous + 1, cut),
                                      parent_length=length))
        previous = cut

    if record.circular:
        first_cut = cuts[0]
        features = [feature for feature in record.features
                    if feature.overlaps(previous + 1, length) or feature.overlaps(1, first_cut)]
        # the first fragment is absorbed into the one wrapping the origin
        fragments[0] = Fragment(sequence[previous:] + sequence[:first_cut], previous + 1,
                                length + first_cut, features, parent_length=length)
        fragments.append(fragments.pop(0))
    elif previous < length:
        fragments.append(Fragment(sequence[previous:], previous + 1, length,
                                  _overlapping_features(record.features, previous + 1, length),
                                  parent_length=length))

    logging.debug("Digest of %s with %s gave %d fragments", record.name, ", ".join(enzyme_names), len(fragments))
    return fragments


def digest_summary(fragments: Iterable[Fragment]) -> List[int]:
    """ Returns the lengths of the fragments, largest first, as would be seen
        when running the digest on a gel
    """
    return sorted((len(fragment) for fragment in fragments), reverse=True)
