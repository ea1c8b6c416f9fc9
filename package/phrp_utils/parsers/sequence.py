"""Tokenize modification-annotated peptide sequences."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..utils.mass import MASS_DIGITS_OF_PRECISION

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[+-]\d+(?:\.(\d*))?")
_BRACKET_MASS = re.compile(r"^[+-]?\d+(?:\.(\d*))?$")


@dataclass
class ModificationAnnotation:
    """
    One modification as written in a peptide.

    Exactly one of ``symbol``, ``mass`` or ``name`` is set. Position 0 is
    the peptide N-terminus; other positions are 1-based residue indices.
    An ambiguous annotation covers ``position`` to ``end_position``.
    """

    position: int
    end_position: Optional[int] = None
    symbol: str = ""
    mass: Optional[float] = None
    name: str = ""
    mass_digits: int = MASS_DIGITS_OF_PRECISION

    def __post_init__(self):
        if self.end_position is None:
            self.end_position = self.position

    @property
    def is_n_terminal(self) -> bool:
        return self.position == 0


@dataclass
class ParsedSequence:
    clean_sequence: str
    annotations: list = field(default_factory=list)


def _digits(decimals: Optional[str]) -> int:
    return min(len(decimals or ""), MASS_DIGITS_OF_PRECISION)


def _bracket_annotations(content: str, start: int, end: int) -> list:
    annotations = []
    for item in content.split(";"):
        item = item.strip()
        if not item:
            continue
        match = _BRACKET_MASS.match(item)
        if match:
            annotations.append(
                ModificationAnnotation(start, end, mass=float(item), mass_digits=_digits(match.group(1)))
            )
        else:
            annotations.append(ModificationAnnotation(start, end, name=item))
    return annotations


def parse_modified_sequence(sequence: str) -> ParsedSequence:
    """
    Split a modified sequence (without flanking residues) into residues and annotations.

    Understood notations:

    - symbols after a residue: ``PEPT*IDE``
    - signed masses after a residue, or before the first one for the
      N-terminus: ``+42.011PEPM+15.995K``
    - bracketed masses or names: ``M[15.995]``, ``M[Oxidation]``
    - ambiguous residue groups: ``(TIIQ)[-30.09]``

    Parameters
    ----------
    sequence: str
        Peptide without its ``X.`` / ``.Y`` flanks.

    Return
    ------
    ParsedSequence
        The clean sequence and the annotations in the order they were written.

    Raises
    ------
    ValueError
        On unbalanced brackets or parentheses.
    """
    residues = []
    annotations = []
    group_start = None
    last_group = None
    i = 0
    while i < len(sequence):
        char = sequence[i]

        if char.isalpha() and char.isupper():
            residues.append(char)
            last_group = None
            i += 1
        elif char == "(":
            if group_start is not None:
                raise ValueError(f"Nested residue groups in '{sequence}'")
            group_start = len(residues) + 1
            i += 1
        elif char == ")":
            if group_start is None:
                raise ValueError(f"Unbalanced ')' in '{sequence}'")
            last_group = (group_start, len(residues))
            group_start = None
            i += 1
        elif char == "[":
            close = sequence.find("]", i)
            if close < 0:
                raise ValueError(f"Unbalanced '[' in '{sequence}'")
            start, end = last_group or (len(residues), len(residues))
            annotations.extend(_bracket_annotations(sequence[i + 1:close], start, end))
            i = close + 1
        elif char in "+-" and _NUMBER.match(sequence, i):
            match = _NUMBER.match(sequence, i)
            position = len(residues)
            annotations.append(
                ModificationAnnotation(
                    position, mass=float(match.group(0)), mass_digits=_digits(match.group(1))
                )
            )
            i = match.end()
        elif char.isspace():
            i += 1
        else:
            annotations.append(ModificationAnnotation(len(residues), symbol=char))
            i += 1

    if group_start is not None:
        raise ValueError(f"Unbalanced '(' in '{sequence}'")
    return ParsedSequence("".join(residues), annotations)
