"""MaxQuant parser function."""

import logging
import re

from ..constants import (
    MAXQUANT_COLUMN_MAPPING,
    MAXQUANT_MODIFICATION_ABBREVIATIONS,
    MAXQUANT_SCORE_COLUMNS,
)
from .utils import map_columns, split_proteins

logger = logging.getLogger(__name__)

# Modification names may hold one level of nested parentheses, e.g. "Oxidation (M)"
_MAXQUANT_MODIFICATION = re.compile(r"\(((?:[^()]|\([^()]*\))+)\)")


def _modification_name(text: str) -> str:
    name = text.strip()
    if name in MAXQUANT_MODIFICATION_ABBREVIATIONS:
        return MAXQUANT_MODIFICATION_ABBREVIATIONS[name]
    # "Oxidation (M)" -> "Oxidation"
    return re.sub(r"\s*\([^()]*\)$", "", name)


def convert_maxquant_sequence(modified_sequence: str) -> str:
    """
    Convert a MaxQuant modified sequence to bracketed modification names.

    ``_(ac)AAM(ox)K_`` and ``_(Acetyl (Protein N-term))AAM(Oxidation (M))K_``
    both become ``[Acetyl]AAM[Oxidation]K``.
    """
    sequence = modified_sequence.strip().strip("_")
    return _MAXQUANT_MODIFICATION.sub(lambda m: f"[{_modification_name(m.group(1))}]", sequence)


def maxquant_parser(row: dict) -> dict:
    """
    Map one line of MaxQuant ``msms.txt`` (or its synopsis file) to unified fields.

    Parameters
    ----------
    row: dict
        Column name -> text for one data line.

    Return
    ------
    dict
        Unified fields; see ``ResultType.parse``.
    """
    record = map_columns(row, MAXQUANT_COLUMN_MAPPING, MAXQUANT_SCORE_COLUMNS)

    peptide = record.get("peptide", "")
    if "Modified sequence" in row and peptide == row["Modified sequence"].strip():
        record["peptide"] = convert_maxquant_sequence(peptide)

    proteins = split_proteins(record.pop("protein", ""))
    leading = record.pop("leading_protein", "")
    if leading:
        proteins = [leading] + [p for p in proteins if p != leading]
    record["proteins"] = proteins
    return record
