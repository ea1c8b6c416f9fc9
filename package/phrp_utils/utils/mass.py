"""Monoisotopic peptide mass calculations."""

import logging
from typing import Iterable, Optional

import numpy as np

from ..exceptions import InvalidResidue

logger = logging.getLogger(__name__)

MASS_HYDROGEN = 1.0078246
MASS_OXYGEN = 15.9949141
MASS_PROTON = 1.00727649
MASS_WATER = 2 * MASS_HYDROGEN + MASS_OXYGEN
MASS_C13_C12_DIFFERENCE = 1.00335483

# Digits used when comparing masses, shared with modification equivalence checks
MASS_DIGITS_OF_PRECISION = 6

RESIDUE_MASSES = {
    "A": 71.0371100902557,
    "C": 103.009180784225,
    "D": 115.026938199997,
    "E": 129.042587518692,
    "F": 147.068408727646,
    "G": 57.0214607715607,
    "H": 137.058904886246,
    "I": 113.084058046341,
    "K": 128.094955444336,
    "L": 113.084058046341,
    "M": 131.040479421616,
    "N": 114.042921543121,
    "P": 97.0527594089508,
    "Q": 128.058570861816,
    "R": 156.101100921631,
    "S": 87.0320241451263,
    "T": 101.047673463821,
    "V": 99.0684087276459,
    "W": 186.079306125641,
    "Y": 163.063322782516,
}


class PeptideMassCalculator:
    """
    Compute monoisotopic peptide masses and precursor mass errors.

    Parameters
    ----------
    residue_masses: dict
        Optional replacement for the standard residue mass table.
    """

    def __init__(self, residue_masses: Optional[dict] = None):
        self.residue_masses = dict(RESIDUE_MASSES if residue_masses is None else residue_masses)
        self.mass_water = MASS_WATER
        self.mass_proton = MASS_PROTON

    def get_residue_mass(self, residue: str) -> float:
        try:
            return self.residue_masses[residue]
        except KeyError:
            raise InvalidResidue(residue)

    def compute_sequence_mass(
        self, clean_sequence: str, modifications: Iterable[tuple] = ()
    ) -> float:
        """
        Compute the monoisotopic mass of a peptide.

        Parameters
        ----------
        clean_sequence: str
            Sequence of one-letter residue codes, without flanking residues or mod symbols.
        modifications: iterable of (position, mass_delta)
            Modification offsets; the position is informational only.

        Return
        ------
        float
            Residue masses plus one water plus all modification deltas.

        Raises
        ------
        InvalidResidue
            If the sequence contains anything other than the 20 standard residues.
        """
        mass = 0.0
        for index, residue in enumerate(clean_sequence):
            if residue not in self.residue_masses:
                raise InvalidResidue(residue, sequence=clean_sequence, position=index + 1)
            mass += self.residue_masses[residue]

        mass += self.mass_water
        for _, mass_delta in modifications:
            mass += mass_delta
        return mass

    def convolute_mass(self, mass: float, charge_from: int, charge_to: int = 1) -> float:
        """
        Convert a mass or m/z from one charge state to another.

        A charge of 0 denotes the neutral monoisotopic mass and a charge of 1
        the M+H value. The conversion always passes through M+H.
        """
        if charge_from == charge_to:
            return mass

        if charge_from == 1:
            mass_mh = mass
        elif charge_from > 1:
            mass_mh = mass * charge_from - self.mass_proton * (charge_from - 1)
        elif charge_from == 0:
            mass_mh = mass + self.mass_proton
        else:
            logger.warning(f"Cannot convolute mass from negative charge {charge_from}")
            return 0.0

        if charge_to > 1:
            return (mass_mh + self.mass_proton * (charge_to - 1)) / charge_to
        if charge_to == 1:
            return mass_mh
        if charge_to == 0:
            return mass_mh - self.mass_proton
        logger.warning(f"Cannot convolute mass to negative charge {charge_to}")
        return 0.0

    @staticmethod
    def mass_to_ppm(delta_mass: float, reference_mass: float) -> float:
        if reference_mass == 0:
            return 0.0
        return delta_mass / reference_mass * 1e6

    @staticmethod
    def ppm_to_mass(ppm: float, reference_mass: float) -> float:
        return ppm / 1e6 * reference_mass

    @staticmethod
    def correct_isotope_error(raw_delta_da: float) -> tuple:
        """
        Remove whole C13 isotope offsets from a precursor mass error.

        Parameters
        ----------
        raw_delta_da: float
            Observed minus theoretical mass, in Da.

        Return
        ------
        tuple(float, int)
            The residual in [-0.5, 0.5] and the signed number of C13 shifts
            so that ``residual + shift * 1.00335483 == raw_delta_da``.
        """
        if not np.isfinite(raw_delta_da):
            return raw_delta_da, 0

        isotope_shift = 0
        if raw_delta_da > 0.5:
            while raw_delta_da - isotope_shift * MASS_C13_C12_DIFFERENCE > 0.5:
                isotope_shift += 1
        elif raw_delta_da < -0.5:
            while raw_delta_da - isotope_shift * MASS_C13_C12_DIFFERENCE < -0.5:
                isotope_shift -= 1

        return raw_delta_da - isotope_shift * MASS_C13_C12_DIFFERENCE, isotope_shift

    def precursor_error_ppm(self, raw_delta_da: float, theoretical_mass: float) -> tuple:
        """Isotope-corrected precursor error in ppm, alongside the isotope shift."""
        corrected, isotope_shift = self.correct_isotope_error(raw_delta_da)
        return self.mass_to_ppm(corrected, theoretical_mass), isotope_shift
