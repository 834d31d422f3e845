# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A more accessible and defined set of data structures for interacting with
    a sequence and its annotations.

    Records created by the parsers and simulators are never mutated by them,
    ownership stays with the caller.
"""

from .colours import FEATURE_COLOURS, get_color_for_feature_type
from .features import (
    Direction,
    Fragment,
    Primer,
    RestrictionSite,
    SequenceFeature,
    new_id,
)
from .sequence import DEFAULT_NAME, DNASequence
