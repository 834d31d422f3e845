# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Annotation types attached to a DNASequence: features, restriction sites,
    primers, and the transient fragments produced by a digest.

    All coordinates are 1-indexed and inclusive.
"""

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, List, Optional, Tuple
import uuid

from .colours import get_color_for_feature_type


def new_id() -> str:
    """ Generates a fresh unique identifier for a record or annotation """
    return str(uuid.uuid4())


@unique
class Direction(Enum):
    """ The strand an annotation lies on """
    FORWARD = "forward"
    REVERSE = "reverse"

    @property
    def strand(self) -> int:
        """ The Biopython-style strand value, 1 or -1 """
        return 1 if self is Direction.FORWARD else -1

    @classmethod
    def from_strand(cls, strand: Optional[int]) -> "Direction":
        """ Converts a Biopython-style strand to a direction, anything other
            than -1 is considered forward
        """
        return cls.REVERSE if strand == -1 else cls.FORWARD

    def __str__(self) -> str:
        return self.value


@dataclass
class SequenceFeature:
    """ An annotated region of a sequence.

        A feature with a start greater than its end wraps around the origin
        of a circular sequence.
    """
    name: str
    type: str
    start: int
    end: int
    direction: Direction = Direction.FORWARD
    color: str = ""
    notes: Optional[str] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            self.direction = Direction(self.direction)
        if not self.color:
            self.color = get_color_for_feature_type(self.type)

    def wraps_origin(self) -> bool:
        """ Returns True if the feature crosses the origin of a circular sequence """
        return self.start > self.end

    def overlaps(self, start: int, end: int) -> bool:
        """ Returns True if the feature overlaps the given inclusive range,
            either by starting within it, ending within it, or spanning it
        """
        return (start <= self.start <= end
                or start <= self.end <= end
                or (self.start <= start and self.end >= end))

    def to_json(self) -> Dict[str, Any]:
        """ Constructs a JSON-friendly representation of the feature """
        result = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "start": self.start,
            "end": self.end,
            "direction": self.direction.value,
            "color": self.color,
        }
        if self.notes is not None:
            result["notes"] = self.notes
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SequenceFeature":
        """ Rebuilds a feature from the result of to_json() """
        return cls(
            name=data["name"],
            type=data["type"],
            start=int(data["start"]),
            end=int(data["end"]),
            direction=Direction(data.get("direction", "forward")),
            color=data.get("color", ""),
            notes=data.get("notes"),
            id=data.get("id") or new_id(),
        )


@dataclass
class RestrictionSite:
    """ A position matching a restriction enzyme's recognition sequence """
    name: str
    start: int
    end: Optional[int] = None
    sequence: Optional[str] = None
    cut_site: Optional[int] = None
    id: str = field(default_factory=new_id)

    @property
    def cut_position(self) -> Optional[int]:
        """ The last base before the cut, in sequence coordinates, or None
            if the cut site isn't known
        """
        if not self.cut_site:
            return None
        return self.start + self.cut_site - 1

    def to_json(self) -> Dict[str, Any]:
        """ Constructs a JSON-friendly representation of the site """
        return {
            "id": self.id,
            "name": self.name,
            "sequence": self.sequence,
            "cut_site": self.cut_site,
            "start": self.start,
            "end": self.end,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RestrictionSite":
        """ Rebuilds a site from the result of to_json() """
        return cls(
            name=data["name"],
            start=int(data["start"]),
            end=data.get("end"),
            sequence=data.get("sequence"),
            cut_site=data.get("cut_site"),
            id=data.get("id") or new_id(),
        )


@dataclass
class Primer:
    """ An oligonucleotide binding to a sequence """
    name: str
    sequence: str
    start: int
    end: int
    direction: Direction = Direction.FORWARD
    melting_temp: Optional[float] = None
    gc_content: Optional[float] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            self.direction = Direction(self.direction)

    def to_json(self) -> Dict[str, Any]:
        """ Constructs a JSON-friendly representation of the primer """
        return {
            "id": self.id,
            "name": self.name,
            "sequence": self.sequence,
            "start": self.start,
            "end": self.end,
            "direction": self.direction.value,
            "melting_temp": self.melting_temp,
            "gc_content": self.gc_content,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Primer":
        """ Rebuilds a primer from the result of to_json() """
        return cls(
            name=data["name"],
            sequence=data["sequence"],
            start=int(data["start"]),
            end=int(data["end"]),
            direction=Direction(data.get("direction", "forward")),
            melting_temp=data.get("melting_temp"),
            gc_content=data.get("gc_content"),
            id=data.get("id") or new_id(),
        )


@dataclass
class Fragment:
    """ A piece of a digested sequence. Coordinates are those of the parent
        sequence, so the wrapping fragment of a circular digest ends beyond
        the parent's length.

        Features are those of the parent overlapping the fragment, still in
        parent coordinates.
    """
    sequence: str
    start: int
    end: int
    features: List[SequenceFeature] = field(default_factory=list)
    parent_length: Optional[int] = None

    def wraps_origin(self) -> bool:
        """ Returns True if the fragment continues through the origin of its
            circular parent
        """
        return self.parent_length is not None and self.end > self.parent_length

    def to_parent(self, position: int) -> int:
        """ Converts a position relative to the start of the fragment, where 1
            is the first base of the fragment, to one in parent coordinates
        """
        position = self.start + position - 1
        if self.parent_length:
            position = (position - 1) % self.parent_length + 1
        return position

    def clip(self, feature: SequenceFeature) -> List[Tuple[int, int]]:
        """ Finds the parts of a parent feature lying within the fragment.

            Arguments:
                feature: the feature, in parent coordinates

            Returns:
                a list of non-adjacent inclusive ranges in fragment coordinates,
                sorted by start, empty if the feature doesn't overlap the fragment
        """
        if feature.wraps_origin() and self.parent_length:
            ranges = [(feature.start, self.parent_length), (1, feature.end)]
        else:
            ranges = [(feature.start, feature.end)]
        # positions past the origin of a wrapping fragment are parent positions
        # offset by the parent length
        shifts = [0, self.parent_length] if self.parent_length else [0]
        parts = []
        for start, end in ranges:
            for shift in shifts:
                first = max(start + shift, self.start)
                last = min(end + shift, self.end)
                if first <= last:
                    parts.append((first - self.start + 1, last - self.start + 1))
        merged: List[Tuple[int, int]] = []
        for start, end in sorted(parts):
            if merged and start == merged[-1][1] + 1:
                merged[-1] = (merged[-1][0], end)
            else:
                merged.append((start, end))
        return merged

    def __len__(self) -> int:
        return len(self.sequence)
