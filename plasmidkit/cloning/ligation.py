# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Simulates ligation of fragments into a single molecule.

    Fragment ends are joined as-is, without any consideration of overhang
    compatibility.
"""

from dataclasses import dataclass, replace
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from plasmidkit.common.model import DNASequence, Direction, Fragment, SequenceFeature, new_id

DEFAULT_LIGATION_NAME = "Ligated_Construct"


@dataclass
class _Piece:
    """ The part of a parent feature carried by a single fragment, in product
        coordinates
    """
    source: SequenceFeature
    start: int
    end: int
    parent_start: int
    parent_end: int
    parent_length: Optional[int]

    def is_continued_by(self, other: "_Piece") -> bool:
        """ Returns True if the other piece is the next part of the same parent
            feature
        """
        if other.source.id != self.source.id:
            return False
        following = self.parent_end + 1
        if self.parent_length:
            following = self.parent_end % self.parent_length + 1
        return other.parent_start == following


def _fragment_pieces(fragment: Fragment, offset: int) -> List[_Piece]:
    """ Clips the features of a fragment to the fragment and moves them into
        the coordinates of the ligation product
    """
    pieces = []
    for feature in fragment.features:
        for start, end in fragment.clip(feature):
            pieces.append(_Piece(feature, start + offset, end + offset,
                                 fragment.to_parent(start), fragment.to_parent(end),
                                 fragment.parent_length))
    return pieces


def _join_pieces(pieces: List[_Piece], length: int, circular: bool) -> List[Tuple[SequenceFeature, int, int]]:
    """ Rejoins pieces of the same parent feature that are adjacent in the
        product, including across the origin of a circular product
    """
    joined: List[_Piece] = []
    last_by_source: Dict[str, _Piece] = {}
    for piece in pieces:
        previous = last_by_source.get(piece.source.id)
        if previous is not None and previous.end + 1 == piece.start and previous.is_continued_by(piece):
            previous.end = piece.end
            previous.parent_end = piece.parent_end
            continue
        joined.append(piece)
        last_by_source[piece.source.id] = piece

    # a piece running to the end of a circular product continues with a piece
    # starting at the origin
    absorbed: Set[int] = set()
    wrapped_ends: Dict[int, int] = {}
    if circular:
        for tail in joined:
            if tail.end != length or tail.start == 1:
                continue
            for head in joined:
                if head.start == 1 and id(head) not in absorbed and tail.is_continued_by(head):
                    absorbed.add(id(head))
                    wrapped_ends[id(tail)] = head.end
                    break
    return [(piece.source, piece.start, wrapped_ends.get(id(piece), piece.end))
            for piece in joined if id(piece) not in absorbed]


def simulate_ligation(fragments: Iterable[Fragment], circular: bool,
                      name: str = DEFAULT_LIGATION_NAME) -> DNASequence:
    """ Joins fragments, in the order given, into a new sequence.

        Features of each fragment are carried over with new identifiers,
        clipped to the fragment and with coordinates adjusted to their
        position in the product. Parts of a feature that meet again in the
        product are rejoined, and duplicate features are dropped. The product
        has no restriction sites, since sites may have been created or
        destroyed at the junctions; these need to be found again if required.

        Arguments:
            fragments: the fragments to join, in order
            circular: whether the product is circular
            name: the name of the product

        Returns:
            a new DNASequence
    """
    parts = []
    pieces: List[_Piece] = []
    offset = 0
    count = 0
    for fragment in fragments:
        parts.append(fragment.sequence)
        pieces.extend(_fragment_pieces(fragment, offset))
        offset += len(fragment.sequence)
        count += 1

    features: List[SequenceFeature] = []
    seen: Set[Tuple[str, str, Direction, int, int]] = set()
    for source, start, end in _join_pieces(pieces, offset, circular):
        key = (source.name, source.type, source.direction, start, end)
        if key in seen:
            continue
        seen.add(key)
        features.append(replace(source, id=new_id(), start=start, end=end))

    logging.debug("Ligated %d fragments into a %s product of %d bases",
                  count, "circular" if circular else "linear", offset)
    return DNASequence(
        name=name,
        sequence="".join(parts),
        circular=circular,
        features=features,
        restriction_sites=[],
        primers=[],
    )
