"""Modification definitions: one chemical modification and the residues it targets."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from ..utils.mass import MASS_DIGITS_OF_PRECISION

NO_SYMBOL = "-"
LAST_RESORT_SYMBOL = "_"
NO_AFFECTED_ATOM = "-"
UNKNOWN_TAG = "UnkMod"

# Terminus markers used in target residue sets
N_TERMINAL_PEPTIDE = "<"
C_TERMINAL_PEPTIDE = ">"
N_TERMINAL_PROTEIN = "["
C_TERMINAL_PROTEIN = "]"
TERMINUS_MARKERS = (N_TERMINAL_PEPTIDE, C_TERMINAL_PEPTIDE, N_TERMINAL_PROTEIN, C_TERMINAL_PROTEIN)


class ModificationType(IntEnum):
    UNKNOWN = 0
    DYNAMIC = 1
    STATIC = 2
    TERMINAL_PEPTIDE_STATIC = 3
    ISOTOPIC = 4
    PROTEIN_TERMINUS_STATIC = 5

    @property
    def letter(self) -> str:
        return _TYPE_LETTERS.get(self, "?")

    @classmethod
    def from_letter(cls, letter: str) -> "ModificationType":
        """Map a one-letter type code (D, S, T, I, P) to a type; anything else is Unknown."""
        for mod_type, type_letter in _TYPE_LETTERS.items():
            if type_letter == letter.strip().upper():
                return mod_type
        return cls.UNKNOWN


_TYPE_LETTERS = {
    ModificationType.DYNAMIC: "D",
    ModificationType.STATIC: "S",
    ModificationType.TERMINAL_PEPTIDE_STATIC: "T",
    ModificationType.ISOTOPIC: "I",
    ModificationType.PROTEIN_TERMINUS_STATIC: "P",
}

STATIC_TYPES = (
    ModificationType.STATIC,
    ModificationType.TERMINAL_PEPTIDE_STATIC,
    ModificationType.PROTEIN_TERMINUS_STATIC,
)


def is_valid_mass_correction_tag(tag: str) -> bool:
    return 0 < len(tag) <= 8 and not any(c in tag for c in ",: ")


@dataclass(eq=False)
class ModificationDefinition:
    """
    A single modification.

    Instances compare by identity; use :meth:`equivalent` to compare chemistry.
    """

    symbol: str
    mass: float
    target_residues: str = ""
    kind: ModificationType = ModificationType.DYNAMIC
    mass_correction_tag: str = ""
    affected_atom: str = NO_AFFECTED_ATOM
    mass_text: Optional[str] = None
    occurrence_count: int = 0
    auto_defined: bool = False

    def __post_init__(self):
        self.kind = ModificationType(self.kind)
        self.target_residues = "".join(dict.fromkeys(self.target_residues))
        if self.mass_text is None:
            self.mass_text = str(self.mass)

    def __repr__(self):
        return (
            f"ModificationDefinition({self.symbol!r}, {self.mass}, {self.target_residues!r}, "
            f"{self.kind.name}, {self.mass_correction_tag!r})"
        )

    @property
    def is_static(self) -> bool:
        return self.kind in STATIC_TYPES

    @property
    def has_symbol(self) -> bool:
        return self.symbol not in (NO_SYMBOL, "")

    def targets(self, residue: str) -> bool:
        return residue in self.target_residues

    def targets_terminus(self) -> bool:
        return any(marker in self.target_residues for marker in TERMINUS_MARKERS)

    def add_target_residue(self, residue: str):
        if residue and residue not in self.target_residues:
            self.target_residues += residue

    def equivalent_mass_type_tag_atom(self, other: "ModificationDefinition") -> bool:
        """Same mass (at 6 decimals), kind, mass correction tag and affected atom."""
        return (
            round(self.mass - other.mass, MASS_DIGITS_OF_PRECISION) == 0
            and self.kind == other.kind
            and self.mass_correction_tag == other.mass_correction_tag
            and self.affected_atom == other.affected_atom
        )

    def equivalent(self, other: "ModificationDefinition") -> bool:
        """
        Full equivalence, including the target residues.

        Dynamic and static modifications match when every residue of ``other``
        is also targeted by ``self``; other kinds need identical residue sets.
        """
        if not self.equivalent_mass_type_tag_atom(other):
            return False

        if self.kind in (ModificationType.DYNAMIC, ModificationType.STATIC):
            return set(other.target_residues) <= set(self.target_residues)
        return set(self.target_residues) == set(other.target_residues)

    def to_dict(self) -> dict:
        return {
            "Modification_Symbol": self.symbol,
            "Modification_Mass": self.mass_text,
            "Target_Residues": self.target_residues,
            "Modification_Type": self.kind.letter,
            "Mass_Correction_Tag": self.mass_correction_tag,
            "Occurrence_Count": self.occurrence_count,
        }
