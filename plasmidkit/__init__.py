# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Parsing of plasmid sequence files and simulation of restriction cloning.

    The most commonly used functions are available directly from this package.
"""

from plasmidkit.common.model import DNASequence, Fragment, Primer, RestrictionSite, SequenceFeature
from plasmidkit.common.utils import design_primers
from plasmidkit.formats import read_sequence, write_sequence
from plasmidkit.cloning import find_restriction_sites, simulate_digest, simulate_ligation
from plasmidkit.main import __version__, run_plasmidkit
