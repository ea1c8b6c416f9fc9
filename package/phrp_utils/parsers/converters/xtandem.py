"""X!Tandem parser function, for both synopsis text files and native XML rows."""

import logging

from ..constants import XTANDEM_COLUMN_MAPPING, XTANDEM_SCORE_COLUMNS
from .utils import map_columns, to_float

logger = logging.getLogger(__name__)


def xtandem_parser(row: dict) -> dict:
    """
    Map one X!Tandem hit to unified fields.

    Rows from the XML reader (``iterate_tandem_rows``) use the synopsis
    column names, so both sources share this mapping.
    """
    record = map_columns(row, XTANDEM_COLUMN_MAPPING, XTANDEM_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []
    record.setdefault("rank", "1")

    peptide_mh = to_float(record.get("peptide_mh"))
    delm_da = to_float(record.get("delm_da"))
    if peptide_mh is not None:
        record["precursor_mh"] = peptide_mh - (delm_da or 0.0)
    return record
