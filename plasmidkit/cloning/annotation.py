# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Annotates a sequence with features copied from a library of previously
    annotated sequences, wherever the exact bases of a library feature occur.
"""

from dataclasses import replace
import logging
from typing import Iterable, List, Optional, Set, Tuple

from plasmidkit.common.model import DNASequence, SequenceFeature, new_id
from plasmidkit.common.path import list_files_with_extension
from plasmidkit.formats.snapgene import SNAPGENE_EXTENSION, parse_snapgene_file


def _feature_bases(library_record: DNASequence, feature: SequenceFeature) -> str:
    # features wrapping the origin have no contiguous bases to search for
    if feature.wraps_origin():
        return ""
    return library_record.sequence[feature.start - 1:feature.end]


def find_feature_in_sequence(sequence: str, feature: SequenceFeature,
                             library_record: DNASequence) -> Optional[SequenceFeature]:
    """ Searches for the bases of a library feature within a sequence

        Arguments:
            sequence: the sequence to search in
            feature: the library feature to search for
            library_record: the library record containing the feature

        Returns:
            a copy of the feature with a new identifier and coordinates of the
            first exact match, or None if the bases aren't present
    """
    bases = _feature_bases(library_record, feature).upper()
    if not bases:
        return None
    index = sequence.upper().find(bases)
    if index == -1:
        return None
    source_note = f"Found in {library_record.name}"
    notes = f"{feature.notes}\n{source_note}" if feature.notes else source_note
    return replace(feature, id=new_id(), start=index + 1, end=index + len(bases), notes=notes)


def annotate_from_library(sequence: str, library: Iterable[DNASequence]) -> List[SequenceFeature]:
    """ Finds all features of the library records present in the given sequence.

        Where multiple library features match with the same type and
        coordinates, only the first is kept.

        Arguments:
            sequence: the sequence to annotate
            library: the records to take features from

        Returns:
            a list of new SequenceFeatures, in library order
    """
    matches: List[SequenceFeature] = []
    seen: Set[Tuple[int, int, str]] = set()
    for library_record in library:
        for feature in library_record.features:
            match = find_feature_in_sequence(sequence, feature, library_record)
            if match is None:
                continue
            key = (match.start, match.end, match.type)
            if key in seen:
                continue
            seen.add(key)
            matches.append(match)
    logging.debug("Found %d library features in sequence", len(matches))
    return matches


def annotate_record(record: DNASequence, library: Iterable[DNASequence]) -> DNASequence:
    """ Builds a copy of the record with library features added to its own,
        skipping any that duplicate an existing feature's type and coordinates.
        The given record is not modified.
    """
    existing = {(feature.start, feature.end, feature.type) for feature in record.features}
    found = [feature for feature in annotate_from_library(record.sequence, library)
             if (feature.start, feature.end, feature.type) not in existing]
    return replace(record, features=list(record.features) + found)


def load_library(directory: str) -> List[DNASequence]:
    """ Reads all SnapGene files in a directory, sorted by filename, for use as
        an annotation library
    """
    records = []
    for path in list_files_with_extension(directory, SNAPGENE_EXTENSION):
        logging.debug("Loading library record from %s", path)
        records.append(parse_snapgene_file(path))
    logging.info("Loaded %d library records from %s", len(records), directory)
    return records
