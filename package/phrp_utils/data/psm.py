import os
from dataclasses import dataclass
from typing import Optional

from psm_utils import PSM as PsmUtilsPSM

from ..utils.cleavage import CleavageState, TerminusState
from ..utils.mass import PeptideMassCalculator
from ..utils.proforma import parse_peptidoform, to_proforma
from .modification import (
    C_TERMINAL_PEPTIDE,
    C_TERMINAL_PROTEIN,
    N_TERMINAL_PEPTIDE,
    N_TERMINAL_PROTEIN,
    ModificationDefinition,
)

UNKNOWN_COLLISION_MODE = "n/a"


@dataclass
class ModifiedResidue:
    """A modification placed on a residue (1-based positions)."""

    residue: str
    position: int
    modification: ModificationDefinition
    end_position: Optional[int] = None

    def __post_init__(self):
        if self.end_position is None:
            self.end_position = self.position

    @property
    def is_ambiguous(self) -> bool:
        return self.end_position != self.position

    @property
    def is_n_terminal(self) -> bool:
        """True for a peptide or protein N-terminal modification on the first residue."""
        targets = self.modification.target_residues
        return (
            self.position == 1
            and (N_TERMINAL_PEPTIDE in targets or N_TERMINAL_PROTEIN in targets)
            and not self.modification.targets(self.residue)
        )

    def is_c_terminal(self, sequence_length: int) -> bool:
        targets = self.modification.target_residues
        return (
            self.position == sequence_length
            and (C_TERMINAL_PEPTIDE in targets or C_TERMINAL_PROTEIN in targets)
            and not self.modification.targets(self.residue)
        )


@dataclass
class ProteinInfo:
    name: str
    residue_start: Optional[int] = None
    residue_end: Optional[int] = None
    terminus_state: TerminusState = TerminusState.NONE
    description: str = ""


class PSM:
    """
    A normalized peptide-spectrum match.

    Engine specific scores are kept as text in ``scores`` so every engine
    fits the same record.
    """

    def __init__(self, scan_number: int, charge: int, peptide: str = "", result_id: int = 0):
        self.result_id = result_id
        self.scan_number = scan_number
        self.charge = charge
        self.collision_mode = UNKNOWN_COLLISION_MODE
        self.peptide = peptide
        self.prefix = ""
        self.suffix = ""
        self.clean_sequence = ""
        self.modified_residues = []
        self.precursor_neutral_mass = None
        self.peptide_monoisotopic_mass = None
        self.mass_error_da = None
        self.mass_error_ppm = None
        self.isotope_shift = 0
        self.num_tryptic_termini = 0
        self.cleavage_state = CleavageState.NON_SPECIFIC
        self.terminus_state = TerminusState.NONE
        self.num_missed_cleavages = 0
        self.proteins = []
        self.protein_details = {}
        self.seq_id = None
        self.score_rank = 1
        self.scores = {}
        self.result_type = None
        self.source_path = None
        self.line_number = None
        self.data_line_text = None

    def __repr__(self):
        return (
            f"PSM(scan={self.scan_number}, charge={self.charge}, "
            f"peptide={self.peptide!r}, proteins={self.proteins})"
        )

    @property
    def key(self) -> tuple:
        """Identity used for duplicate suppression."""
        return (self.scan_number, self.clean_sequence, self.charge)

    @property
    def protein_first(self) -> str:
        return self.proteins[0] if self.proteins else ""

    def add_protein(self, name: str, residue_start=None, residue_end=None, description=""):
        name = name.strip()
        if not name:
            return
        if name not in self.proteins:
            self.proteins.append(name)
        if residue_start is not None or name not in self.protein_details:
            self.protein_details[name] = ProteinInfo(
                name, residue_start, residue_end, self.terminus_state, description
            )

    def add_modified_residue(
        self,
        residue: str,
        position: int,
        modification: ModificationDefinition,
        end_position: Optional[int] = None,
    ) -> ModifiedResidue:
        modified_residue = ModifiedResidue(residue, position, modification, end_position)
        self.modified_residues.append(modified_residue)
        return modified_residue

    @property
    def modification_offsets(self) -> list:
        return [(m.position, m.modification.mass) for m in self.modified_residues]

    def set_score(self, name: str, value):
        self.scores[name] = "" if value is None else str(value)

    def get_score(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Score text by column name, or ``default`` when this engine has no such score."""
        return self.scores.get(name, default)

    def get_score_float(self, name: str, default: Optional[float] = None) -> Optional[float]:
        value = self.scores.get(name)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            return default

    def get_score_int(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get_score_float(name)
        if value is None:
            return default
        return int(value)

    @property
    def peptide_with_numeric_mods(self) -> str:
        """Clean sequence with each modification mass written after its residue, e.g. ``PEPT+79.9663IDE``."""
        masses = {}
        for m in self.modified_residues:
            masses.setdefault(m.position, []).append(m.modification.mass)
        return "".join(
            residue + "".join(f"{mass:+.4f}" for mass in masses.get(position, []))
            for position, residue in enumerate(self.clean_sequence, start=1)
        )

    @property
    def proforma(self) -> str:
        n_term, c_term, residue_masses = [], [], {}
        for m in self.modified_residues:
            if m.is_n_terminal:
                n_term.append(m.modification.mass)
            elif m.is_c_terminal(len(self.clean_sequence)):
                c_term.append(m.modification.mass)
            else:
                residue_masses.setdefault(m.position, []).append(m.modification.mass)
        return to_proforma(self.clean_sequence, residue_masses, n_term, c_term, self.charge or None)

    @property
    def precursor_mz(self) -> Optional[float]:
        if self.precursor_neutral_mass is None or not self.charge:
            return None
        return PeptideMassCalculator().convolute_mass(self.precursor_neutral_mass, 0, self.charge)

    def to_dict(self) -> dict:
        return {
            "ResultID": self.result_id,
            "Scan": self.scan_number,
            "Charge": self.charge,
            "CollisionMode": self.collision_mode,
            "Peptide": self.peptide,
            "CleanSequence": self.clean_sequence,
            "PeptideWithNumericMods": self.peptide_with_numeric_mods,
            "Protein": self.protein_first,
            "Proteins": ";".join(self.proteins),
            "PrecursorNeutralMass": self.precursor_neutral_mass,
            "MonoisotopicMass": self.peptide_monoisotopic_mass,
            "DelM": self.mass_error_da,
            "DelM_PPM": self.mass_error_ppm,
            "IsotopeShift": self.isotope_shift,
            "NTT": self.num_tryptic_termini,
            "CleavageState": self.cleavage_state.name,
            "MissedCleavages": self.num_missed_cleavages,
            "Rank": self.score_rank,
            **self.scores,
        }

    def to_psm_utils(self, score_name: Optional[str] = None, run: Optional[str] = None) -> Optional[PsmUtilsPSM]:
        """
        Convert to a psm_utils PSM.

        Parameters
        ----------
        score_name: str
            Score column to use as the psm_utils score.
        run: str
            Run name; defaults to the base name of the source file.

        Return
        ------
        psm_utils.PSM
            None when the peptide cannot be written as proforma.
        """
        peptidoform = parse_peptidoform(self.proforma)
        if peptidoform is None:
            return None
        return PsmUtilsPSM(
            peptidoform=peptidoform,
            spectrum_id=str(self.scan_number),
            run=run if run is not None else os.path.basename(self.source_path or ""),
            score=self.get_score_float(score_name) if score_name else None,
            precursor_mz=self.precursor_mz,
            protein_list=list(self.proteins) or None,
            rank=self.score_rank,
            source=self.result_type,
            metadata={k: v for k, v in self.scores.items()},
        )
