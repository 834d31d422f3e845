# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" The canonical in-memory representation of a DNA molecule and its
    annotations.

    Can convert to and from Biopython, but that use is intended only to simplify
    interoperation with other tools, the native text formats are handled
    by plasmidkit.formats.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from Bio.Seq import Seq
from Bio.SeqFeature import CompoundLocation, FeatureLocation, SeqFeature
from Bio.SeqRecord import SeqRecord

from .features import (
    Direction,
    Primer,
    RestrictionSite,
    SequenceFeature,
    new_id,
)

DEFAULT_NAME = "Unnamed_Sequence"


@dataclass
class DNASequence:
    """ A nucleotide sequence with topology, metadata and annotations.

        The length is always that of the sequence itself.
    """
    name: str
    sequence: str
    circular: bool = False
    features: List[SequenceFeature] = field(default_factory=list)
    restriction_sites: List[RestrictionSite] = field(default_factory=list)
    primers: List[Primer] = field(default_factory=list)
    organism: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    accession: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not isinstance(self.sequence, str):
            raise TypeError(f"sequence must be a string, not {type(self.sequence)}")

    @property
    def length(self) -> int:
        """ The number of bases in the sequence """
        return len(self.sequence)

    def __len__(self) -> int:
        return len(self.sequence)

    def get_features_by_type(self, feature_type: str) -> List[SequenceFeature]:
        """ Returns all features of the given type, in order """
        return [feature for feature in self.features if feature.type == feature_type]

    def to_json(self) -> Dict[str, Any]:
        """ Constructs a JSON-friendly representation of the record """
        return {
            "id": self.id,
            "name": self.name,
            "sequence": self.sequence,
            "length": self.length,
            "circular": self.circular,
            "organism": self.organism,
            "description": self.description,
            "category": self.category,
            "accession": self.accession,
            "features": [feature.to_json() for feature in self.features],
            "restriction_sites": [site.to_json() for site in self.restriction_sites],
            "primers": [primer.to_json() for primer in self.primers],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DNASequence":
        """ Rebuilds a record from the result of to_json()

            Raises a ValueError if the stored length doesn't match the stored
            sequence.
        """
        sequence = data["sequence"]
        if "length" in data and data["length"] != len(sequence):
            raise ValueError(f"record length {data['length']} doesn't match sequence length {len(sequence)}")
        now = datetime.now()
        created = data.get("created_at")
        updated = data.get("updated_at")
        return cls(
            name=data.get("name") or DEFAULT_NAME,
            sequence=sequence,
            circular=bool(data.get("circular", False)),
            features=[SequenceFeature.from_json(feature) for feature in data.get("features", [])],
            restriction_sites=[RestrictionSite.from_json(site) for site in data.get("restriction_sites", [])],
            primers=[Primer.from_json(primer) for primer in data.get("primers", [])],
            organism=data.get("organism"),
            description=data.get("description"),
            category=data.get("category"),
            accession=data.get("accession"),
            id=data.get("id") or new_id(),
            created_at=datetime.fromisoformat(created) if created else now,
            updated_at=datetime.fromisoformat(updated) if updated else now,
        )

    def to_biopython(self) -> SeqRecord:
        """ Constructs a Biopython SeqRecord with the same sequence, topology
            and features. Restriction sites and primers are not carried over.
        """
        record = SeqRecord(Seq(self.sequence), id=self.accession or self.name,
                           name=self.name, description=self.description or "")
        record.annotations["molecule_type"] = "DNA"
        record.annotations["topology"] = "circular" if self.circular else "linear"
        if self.organism:
            record.annotations["organism"] = self.organism
        for feature in self.features:
            strand = feature.direction.strand
            if feature.wraps_origin():
                location = CompoundLocation([FeatureLocation(feature.start - 1, len(self), strand),
                                             FeatureLocation(0, feature.end, strand)])
            else:
                location = FeatureLocation(feature.start - 1, feature.end, strand)
            qualifiers = {"label": [feature.name]}
            if feature.notes:
                qualifiers["note"] = [feature.notes]
            record.features.append(SeqFeature(location, type=feature.type, qualifiers=qualifiers))
        return record

    @classmethod
    def from_biopython(cls, record: SeqRecord) -> "DNASequence":
        """ Constructs a DNASequence from a Biopython SeqRecord.

            Source features are skipped and compound locations are reduced to
            their outer bounds, unless they bridge the origin.
        """
        sequence = str(record.seq)
        annotations = record.annotations or {}
        circular = annotations.get("topology", "linear") == "circular"
        features = []
        for feature in record.features:
            if feature.type == "source":
                continue
            location = feature.location
            start = int(location.start) + 1
            end = int(location.end)
            if isinstance(location, CompoundLocation):
                parts = sorted(location.parts, key=lambda part: int(part.start))
                # a part running to the end of the sequence followed by one from
                # the start of the sequence crosses the origin
                if circular and len(parts) > 1 and int(parts[0].start) == 0 and int(parts[-1].end) == len(sequence):
                    start = int(parts[-1].start) + 1
                    end = int(parts[0].end)
            qualifiers = feature.qualifiers or {}
            name = (qualifiers.get("label") or qualifiers.get("gene") or [feature.type])[0]
            notes = qualifiers.get("note")
            features.append(SequenceFeature(
                name=name,
                type=feature.type,
                start=start,
                end=end,
                direction=Direction.from_strand(location.strand),
                notes=notes[0] if notes else None,
            ))
        return cls(
            name=record.name or DEFAULT_NAME,
            sequence=sequence,
            circular=circular,
            features=features,
            organism=annotations.get("organism"),
            description=record.description or None,
        )
