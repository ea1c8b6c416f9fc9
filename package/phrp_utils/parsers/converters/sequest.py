"""SEQUEST synopsis and first-hits parser function."""

import logging

from ..constants import SEQUEST_COLUMN_MAPPING, SEQUEST_SCORE_COLUMNS
from .utils import map_columns, to_float

logger = logging.getLogger(__name__)


def sequest_parser(row: dict) -> dict:
    """
    Map one line of a SEQUEST ``_syn.txt``/``_fht.txt`` file to unified fields.

    Parameters
    ----------
    row: dict
        Column name -> text for one data line.

    Return
    ------
    dict
        Unified fields; see ``ResultType.parse``.
    """
    record = map_columns(row, SEQUEST_COLUMN_MAPPING, SEQUEST_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []

    # MH is the peptide's M+H; DelM is subtracted to get back to the precursor
    peptide_mh = to_float(record.get("peptide_mh"))
    delm_da = to_float(record.get("delm_da"))
    if peptide_mh is not None:
        record["precursor_mh"] = peptide_mh - (delm_da or 0.0)
    return record
