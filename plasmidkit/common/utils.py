# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A collection of sequence-level calculations used throughout plasmidkit:
    complements, GC content, melting temperatures, and simple primer design.
"""

from typing import Tuple

from .model import Direction, Primer

# IUPAC ambiguity codes map to the code covering the complementary bases,
# anything missing (e.g. N, gaps) is left untouched
_COMPLEMENTS = {
    "A": "T", "T": "A", "G": "C", "C": "G",
    "R": "Y", "Y": "R",  # A/G, C/T
    "M": "K", "K": "M",  # A/C, G/T
    "S": "S", "W": "W",  # G/C, A/T
    "H": "D", "D": "H",  # A/C/T, G/A/T
    "B": "V", "V": "B",  # G/T/C, G/C/A
    "N": "N",
}
_COMPLEMENT_TABLE = str.maketrans({**_COMPLEMENTS, **{k.lower(): v.lower() for k, v in _COMPLEMENTS.items()}})

SHORT_PRIMER_LIMIT = 14
MAX_PRIMER_FLANK = 10


def get_complementary_sequence(sequence: str) -> str:
    """ Complements each base of a DNA sequence, preserving case """
    return sequence.translate(_COMPLEMENT_TABLE)


def get_reverse_sequence(sequence: str) -> str:
    """ Reverses a DNA sequence """
    return sequence[::-1]


def get_reverse_complement_sequence(sequence: str) -> str:
    """ Generates the reverse complement of a DNA sequence """
    return get_reverse_sequence(get_complementary_sequence(sequence))


def calculate_gc_content(sequence: str) -> float:
    """ Calculates the GC content of a sequence

        Arguments:
            sequence: the DNA sequence

        Returns:
            the percentage of G or C bases in the sequence (0-100),
            0 for an empty sequence
    """
    if not sequence:
        return 0.
    upper = sequence.upper()
    return (upper.count("G") + upper.count("C")) / len(sequence) * 100


def calculate_melting_temperature(sequence: str) -> float:
    """ Approximates the melting temperature of an oligonucleotide.

        Short sequences use the Wallace rule, 2 degrees per A/T and 4 per G/C.
        Longer sequences use 64.9 + 0.41 * GC% - 500 / length.

        Arguments:
            sequence: the oligonucleotide sequence

        Returns:
            the approximate melting temperature in degrees Celsius
    """
    upper = sequence.upper()
    if len(upper) < SHORT_PRIMER_LIMIT:
        at_count = upper.count("A") + upper.count("T")
        gc_count = upper.count("G") + upper.count("C")
        return float(2 * at_count + 4 * gc_count)
    return 64.9 + 0.41 * calculate_gc_content(upper) - 500 / len(upper)


def design_primers(sequence: str, start: int, end: int, primer_length: int = 20) -> Tuple[Primer, Primer]:
    """ Picks a forward and reverse primer flanking a target region.

        The target region is extended by up to half a primer length (at most
        10 bases) on each side; the forward primer is the start of that window,
        the reverse primer the reverse complement of its end. No checks are made
        for specificity, hairpins or dimers.

        Arguments:
            sequence: the full template sequence
            start: the first base of the target region (1-indexed)
            end: the last base of the target region (1-indexed, inclusive)
            primer_length: the length of each primer

        Returns:
            a tuple of forward primer and reverse primer
    """
    if primer_length < 1:
        raise ValueError(f"primer length must be positive: {primer_length}")
    if start < 1 or end > len(sequence) or start > end:
        raise ValueError(f"invalid target region {start}-{end} for sequence of length {len(sequence)}")

    flank = min(primer_length // 2, MAX_PRIMER_FLANK)
    window = sequence[max(0, start - flank - 1):min(len(sequence), end + flank)]

    forward_seq = window[:primer_length]
    forward_start = max(1, start - flank)
    forward = Primer(
        name=f"Forward_{start}",
        sequence=forward_seq,
        start=forward_start,
        end=forward_start + primer_length - 1,
        direction=Direction.FORWARD,
        melting_temp=calculate_melting_temperature(forward_seq),
        gc_content=calculate_gc_content(forward_seq),
    )

    reverse_seq = get_reverse_complement_sequence(window[-primer_length:])
    reverse_end = min(len(sequence), end + flank)
    reverse = Primer(
        name=f"Reverse_{end}",
        sequence=reverse_seq,
        start=reverse_end - primer_length + 1,
        end=reverse_end,
        direction=Direction.REVERSE,
        melting_temp=calculate_melting_temperature(reverse_seq),
        gc_content=calculate_gc_content(reverse_seq),
    )
    return forward, reverse
