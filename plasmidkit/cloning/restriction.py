# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Locates restriction enzyme recognition sequences within a sequence.

    Scans are linear only: a recognition sequence spanning the origin of a
    circular molecule will not be found.
"""

from collections import Counter
from dataclasses import replace
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from plasmidkit.common.model import DNASequence, RestrictionSite

from .enzymes import COMMON_ENZYMES, Enzyme

EnzymeLike = Union[Enzyme, Mapping[str, Any]]


def _find_all(haystack: str, needle: str) -> Iterator[int]:
    """ Yields the 0-indexed offset of each non-overlapping occurrence """
    position = haystack.find(needle)
    while position != -1:
        yield position
        position = haystack.find(needle, position + len(needle))


def _as_enzyme(enzyme: EnzymeLike) -> Optional[Enzyme]:
    """ Converts a mapping with name, sequence and cut_site (or cutSite) keys
        into an Enzyme, returning None for entries without a recognition sequence
    """
    if isinstance(enzyme, Enzyme):
        return enzyme
    if not enzyme.get("sequence"):
        return None
    cut_site = enzyme.get("cut_site", enzyme.get("cutSite", 0))
    return Enzyme(enzyme["name"], enzyme["sequence"], int(cut_site or 0))


def find_restriction_sites(sequence: str, enzymes: Optional[Iterable[EnzymeLike]] = None) -> List[RestrictionSite]:
    """ Finds all sites of the given enzymes within a sequence.

        Matching is case-insensitive and literal, with each enzyme's sites
        reported left to right before moving on to the next enzyme.

        Arguments:
            sequence: the sequence to search
            enzymes: the enzymes to search for, defaulting to the common panel,
                     either as Enzyme instances or mappings of the same fields

        Returns:
            a list of RestrictionSites, with 1-indexed inclusive coordinates
    """
    if enzymes is None:
        enzymes = COMMON_ENZYMES
    upper = sequence.upper()
    sites = []
    for candidate in enzymes:
        enzyme = _as_enzyme(candidate)
        if enzyme is None:
            continue
        pattern = enzyme.sequence.upper()
        for offset in _find_all(upper, pattern):
            sites.append(RestrictionSite(
                name=enzyme.name,
                sequence=enzyme.sequence,
                cut_site=enzyme.cut_site,
                start=offset + 1,
                end=offset + len(pattern),
            ))
    logging.debug("Found %d restriction sites in sequence of length %d", len(sites), len(sequence))
    return sites


def count_sites_by_enzyme(sites: Iterable[RestrictionSite]) -> Dict[str, int]:
    """ Counts the number of sites found for each enzyme, e.g. for picking
        enzymes that cut only once
    """
    return dict(Counter(site.name for site in sites))


def with_restriction_sites(record: DNASequence, enzymes: Optional[Iterable[EnzymeLike]] = None) -> DNASequence:
    """ Builds a copy of the record with its restriction sites recalculated,
        leaving the given record unmodified
    """
    return replace(record, features=list(record.features), primers=list(record.primers),
                   restriction_sites=find_restriction_sites(record.sequence, enzymes))
