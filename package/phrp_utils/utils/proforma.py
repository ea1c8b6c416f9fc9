"""Utility functions for rendering normalized PSMs as proforma peptidoforms."""

import logging
from typing import Optional

from psm_utils import Peptidoform
from psm_utils.peptidoform import PeptidoformException
from pyteomics.proforma import ProFormaError

logger = logging.getLogger(__name__)


def format_mass_delta(mass: float, digits: int = 4) -> str:
    return f"{mass:+.{digits}f}"


def to_proforma(
    clean_sequence: str,
    residue_masses: dict,
    n_term_masses: list = (),
    c_term_masses: list = (),
    charge: Optional[int] = None,
) -> str:
    """
    Write a sequence and its modification masses as a proforma string.

    Parameters
    ----------
    clean_sequence: str
        Unmodified residue sequence.
    residue_masses: dict
        1-based residue position -> list of modification masses on that residue.
    n_term_masses, c_term_masses: list
        Modification masses on the peptide termini.
    charge: int
        Precursor charge appended as ``/charge`` when given.

    Return
    ------
    str
        For example ``[+42.0106]-PEPT[+79.9663]IDE/2``.
    """
    proforma = "".join(f"[{format_mass_delta(m)}]" for m in n_term_masses)
    if n_term_masses:
        proforma += "-"
    for position, residue in enumerate(clean_sequence, start=1):
        proforma += residue
        proforma += "".join(f"[{format_mass_delta(m)}]" for m in residue_masses.get(position, []))
    if c_term_masses:
        proforma += "-" + "".join(f"[{format_mass_delta(m)}]" for m in c_term_masses)

    if charge:
        proforma += f"/{charge}"
    return proforma


def parse_peptidoform(peptide: str) -> Optional[Peptidoform]:
    """
    Parse a proforma string into a psm-utils peptidoform.

    Returns None (and logs a warning) when the string is not valid proforma.
    """
    try:
        return Peptidoform(peptide)
    except (ProFormaError, PeptidoformException):
        logger.warning(f"Failed to parse: {peptide}")
        return None
