"""Peptide notation splitting and enzyme cleavage state classification."""

import re
from dataclasses import dataclass
from enum import IntEnum

from ..exceptions import EnzymeNotSupported

# Characters that mark a protein terminus in the prefix or suffix
TERMINUS_SYMBOLS = ("-", "[", "]")


class CleavageState(IntEnum):
    NON_SPECIFIC = 0
    PARTIAL = 1
    FULL = 2


class TerminusState(IntEnum):
    NONE = 0
    PROTEIN_N_TERMINUS = 1
    PROTEIN_C_TERMINUS = 2
    PROTEIN_N_AND_C_TERMINUS = 3


@dataclass(frozen=True)
class CleavageRule:
    """
    Residues an enzyme cleaves after (``left``) or before (``right``).

    ``exceptions`` lists residues that block cleavage when they follow the site.
    """

    description: str
    left: str
    right: str
    exceptions: str = ""

    def cleaves(self, left_residue: str, right_residue: str) -> bool:
        if not left_residue or not right_residue:
            return False
        if left_residue not in self.left or right_residue not in self.right:
            return False
        return right_residue not in self.exceptions


ALL_RESIDUES = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

ENZYME_RULES = {
    "trypsin": CleavageRule("Standard tryptic cleavage", "KR", ALL_RESIDUES, "P"),
    "trypsin_no_proline_rule": CleavageRule("Trypsin without proline rule", "KR", ALL_RESIDUES),
    "trypsin_plus_fvley": CleavageRule("Trypsin plus FVLEY", "KRFYVEL", ALL_RESIDUES),
    "chymotrypsin": CleavageRule("Chymotrypsin", "FWYL", ALL_RESIDUES),
    "chymotrypsin_and_trypsin": CleavageRule("Chymotrypsin and trypsin", "FWYLKR", ALL_RESIDUES),
    "gluc": CleavageRule("Glu-C", "ED", ALL_RESIDUES),
    "cyanbr": CleavageRule("CNBr", "M", ALL_RESIDUES),
    "argc": CleavageRule("Arg-C", "R", ALL_RESIDUES),
    "lysc": CleavageRule("Lys-C", "K", ALL_RESIDUES),
    "aspn": CleavageRule("Asp-N", ALL_RESIDUES, "D"),
    "no_enzyme": CleavageRule("No enzyme", ALL_RESIDUES, ALL_RESIDUES),
}

# Alternate spellings found in search engine parameter files
ENZYME_ALIASES = {
    "tryp": "trypsin",
    "1": "trypsin",
    "trypsin/p": "trypsin_no_proline_rule",
    "2": "chymotrypsin",
    "3": "lysc",
    "4": "lysc",
    "5": "gluc",
    "6": "argc",
    "7": "aspn",
    "9": "no_enzyme",
    "0": "no_enzyme",
    "lys-c": "lysc",
    "glu-c": "gluc",
    "arg-c": "argc",
    "asp-n": "aspn",
    "cnbr": "cyanbr",
    "nonspecific": "no_enzyme",
    "unspecific": "no_enzyme",
}

_NON_LETTER = re.compile(r"[^A-Za-z]")


def get_cleavage_rule(enzyme) -> CleavageRule:
    """Return the cleavage rule for an enzyme name or pass a rule through."""
    if isinstance(enzyme, CleavageRule):
        return enzyme
    key = str(enzyme).strip().lower().replace(" ", "_")
    key = ENZYME_ALIASES.get(key, key)
    if key not in ENZYME_RULES:
        raise EnzymeNotSupported(enzyme, list(ENZYME_RULES))
    return ENZYME_RULES[key]


def extract_clean_sequence(sequence: str) -> str:
    """Strip everything but letters from a (possibly modified) sequence."""
    return _NON_LETTER.sub("", sequence)


def split_prefix_and_suffix(annotated_peptide: str) -> tuple:
    """
    Split ``X.SEQUENCE.Y`` into prefix, sequence and suffix.

    The split happens on the first and last period. Without periods the
    whole string is the sequence. A single period only splits when it is
    the first or last character, or sits next to a one-character flank
    (``K.PEPTIDE``, ``PEPTIDE.K``); elsewhere it belongs to a modification
    mass and the string is returned unchanged. A leading or trailing ``..``
    (empty flank plus period) is also tolerated.

    Examples
    --------
    >>> split_prefix_and_suffix("A.BCDE.F")
    ('A', 'BCDE', 'F')
    >>> split_prefix_and_suffix("A.BCDE")
    ('A', 'BCDE', '')
    >>> split_prefix_and_suffix("M+15.995PEPTIDE")
    ('', 'M+15.995PEPTIDE', '')
    """
    peptide = annotated_peptide.strip()
    if "." not in peptide:
        return "", peptide, ""

    if peptide.startswith("..") and len(peptide) > 2:
        peptide = "." + peptide[2:]
    if peptide.endswith("..") and len(peptide) > 2:
        peptide = peptide[:-2] + "."

    first = peptide.index(".")
    last = peptide.rindex(".")

    if first != last:
        return peptide[:first], peptide[first + 1:last], peptide[last + 1:]

    # Single period: only a separator when a one-character flank (or none)
    # sits on its other side; M+15.995PEPTIDE keeps its decimal point
    if first == 0:
        return "", peptide[1:], ""
    if first == len(peptide) - 1:
        return "", peptide[:first], ""
    if first == 1 and len(peptide) > 2:
        return peptide[:first], peptide[first + 1:], ""
    if first == len(peptide) - 2:
        return "", peptide[:first], peptide[first + 1:]
    return "", peptide, ""


class CleavageStateCalculator:
    """
    Classify how well a peptide's termini agree with an enzyme's cleavage rule.

    Parameters
    ----------
    enzyme: str or CleavageRule
        Enzyme name (see ``ENZYME_RULES``) or a custom rule. Defaults to trypsin.
    """

    def __init__(self, enzyme="trypsin"):
        self.rule = get_cleavage_rule(enzyme)

    split_prefix_and_suffix = staticmethod(split_prefix_and_suffix)
    extract_clean_sequence = staticmethod(extract_clean_sequence)

    @staticmethod
    def _flank_residue(flank: str, use_last: bool) -> str:
        # A missing flank is unknown: neither a terminus nor a cleavage site
        letters = [c for c in flank if c.isalpha() or c in TERMINUS_SYMBOLS]
        if not letters:
            return ""
        return letters[-1] if use_last else letters[0]

    @staticmethod
    def _is_terminus(residue: str) -> bool:
        return bool(residue) and residue in TERMINUS_SYMBOLS

    def _cleaves(self, left_residue: str, right_residue: str) -> bool:
        return self.rule.cleaves(left_residue.upper(), right_residue.upper())

    def count_tryptic_termini(self, prefix: str, sequence: str, suffix: str, enzyme_rule=None) -> int:
        """
        Count the peptide ends (0, 1 or 2) that satisfy the cleavage rule.

        A flank that is a terminus symbol always counts as cleaved; a missing
        flank never does.
        """
        rule = self.rule if enzyme_rule is None else get_cleavage_rule(enzyme_rule)
        clean_sequence = extract_clean_sequence(sequence).upper()
        if not clean_sequence:
            return 0

        prefix_residue = self._flank_residue(prefix, use_last=True)
        suffix_residue = self._flank_residue(suffix, use_last=False)

        count = 0
        if self._is_terminus(prefix_residue) or rule.cleaves(prefix_residue.upper(), clean_sequence[0]):
            count += 1
        if self._is_terminus(suffix_residue) or rule.cleaves(clean_sequence[-1], suffix_residue.upper()):
            count += 1
        return count

    def compute_cleavage_state(self, prefix: str, sequence: str, suffix: str) -> CleavageState:
        """
        Classify a peptide as fully, partially or non-specifically cleaved.

        Peptides at a protein terminus are judged on their other end only.
        """
        clean_sequence = extract_clean_sequence(sequence).upper()
        if not clean_sequence:
            return CleavageState.NON_SPECIFIC

        prefix_residue = self._flank_residue(prefix, use_last=True)
        suffix_residue = self._flank_residue(suffix, use_last=False)
        n_terminus = self._is_terminus(prefix_residue)
        c_terminus = self._is_terminus(suffix_residue)

        if n_terminus and c_terminus:
            return CleavageState.FULL

        n_cleaved = n_terminus or self._cleaves(prefix_residue, clean_sequence[0])
        c_cleaved = c_terminus or self._cleaves(clean_sequence[-1], suffix_residue)

        if n_terminus:
            return CleavageState.FULL if c_cleaved else CleavageState.NON_SPECIFIC
        if c_terminus:
            return CleavageState.FULL if n_cleaved else CleavageState.NON_SPECIFIC
        if n_cleaved and c_cleaved:
            return CleavageState.FULL
        if n_cleaved or c_cleaved:
            return CleavageState.PARTIAL
        return CleavageState.NON_SPECIFIC

    def compute_terminus_state(self, prefix: str, suffix: str) -> TerminusState:
        n_terminus = self._is_terminus(self._flank_residue(prefix, use_last=True))
        c_terminus = self._is_terminus(self._flank_residue(suffix, use_last=False))
        if n_terminus and c_terminus:
            return TerminusState.PROTEIN_N_AND_C_TERMINUS
        if n_terminus:
            return TerminusState.PROTEIN_N_TERMINUS
        if c_terminus:
            return TerminusState.PROTEIN_C_TERMINUS
        return TerminusState.NONE

    def compute_missed_cleavages(self, sequence: str) -> int:
        """Count internal cleavage sites, ignoring the peptide's final residue."""
        clean_sequence = extract_clean_sequence(sequence).upper()
        return sum(
            1
            for left, right in zip(clean_sequence, clean_sequence[1:])
            if self.rule.cleaves(left, right)
        )
