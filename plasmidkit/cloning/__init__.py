# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Cloning simulations: restriction site scanning, digestion, ligation and
    library-based annotation.

    All simulations are pure, the records given are never modified.
"""

from .enzymes import COMMON_ENZYMES, Enzyme, get_enzyme_names, get_enzymes, is_known_enzyme
from .restriction import count_sites_by_enzyme, find_restriction_sites, with_restriction_sites
from .digest import digest_summary, simulate_digest
from .ligation import simulate_ligation
from .annotation import annotate_from_library, annotate_record, load_library
