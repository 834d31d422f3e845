# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Display colours assigned to features by type """

from types import MappingProxyType
from typing import Mapping

DEFAULT_FEATURE_COLOUR = "#9E9E9E"  # grey

FEATURE_COLOURS: Mapping[str, str] = MappingProxyType({
    "CDS": "#FF5252",  # red
    "promoter": "#FFC107",  # amber
    "terminator": "#9C27B0",  # purple
    "rep_origin": "#2196F3",  # blue
    "primer_bind": "#FF9800",  # orange
    "misc_feature": "#4CAF50",  # green
})


def get_color_for_feature_type(feature_type: str) -> str:
    """ Returns the display colour for the given feature type, falling back
        to grey for any type without a specific colour
    """
    return FEATURE_COLOURS.get(feature_type, DEFAULT_FEATURE_COLOUR)
