# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Restriction enzyme definitions and the default panel used when scanning
    newly parsed sequences.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from plasmidkit.common.errors import ValidationError, ValidationErrorKind


@dataclass(frozen=True)
class Enzyme:
    """ A restriction enzyme, its recognition sequence, and the 1-indexed
        position within the recognition sequence after which it cuts
    """
    name: str
    sequence: str
    cut_site: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("enzymes must have a name")
        if not self.sequence:
            raise ValueError(f"enzyme {self.name} has no recognition sequence")

    def __len__(self) -> int:
        return len(self.sequence)


COMMON_ENZYMES: Tuple[Enzyme, ...] = (
    Enzyme("EcoRI", "GAATTC", 1),
    Enzyme("BamHI", "GGATCC", 1),
    Enzyme("HindIII", "AAGCTT", 1),
    Enzyme("XbaI", "TCTAGA", 1),
    Enzyme("PstI", "CTGCAG", 5),
    Enzyme("SalI", "GTCGAC", 1),
    Enzyme("SmaI", "CCCGGG", 3),
    Enzyme("KpnI", "GGTACC", 5),
    Enzyme("SacI", "GAGCTC", 5),
    Enzyme("XhoI", "CTCGAG", 1),
)

_ENZYMES_BY_NAME: Dict[str, Enzyme] = {enzyme.name: enzyme for enzyme in COMMON_ENZYMES}


def get_enzyme_names() -> List[str]:
    """ Returns the names of all enzymes in the default panel, in panel order """
    return [enzyme.name for enzyme in COMMON_ENZYMES]


def is_known_enzyme(name: str) -> bool:
    """ Returns True if the name is that of an enzyme in the default panel """
    return name in _ENZYMES_BY_NAME


def get_enzymes(names: Iterable[str]) -> List[Enzyme]:
    """ Fetches enzymes from the default panel by name

        Arguments:
            names: the names of the enzymes to fetch, in the order wanted

        Returns:
            a list of Enzymes, one for each name
    """
    enzymes = []
    for name in names:
        if name not in _ENZYMES_BY_NAME:
            raise ValidationError(ValidationErrorKind.UNKNOWN_ENZYME, name)
        enzymes.append(_ENZYMES_BY_NAME[name])
    return enzymes
