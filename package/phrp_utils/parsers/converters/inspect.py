"""Inspect parser function."""

import logging

from ..constants import INSPECT_COLUMN_MAPPING, INSPECT_SCORE_COLUMNS
from .utils import map_columns, to_float, to_int

logger = logging.getLogger(__name__)


def inspect_parser(row: dict) -> dict:
    """
    Map one line of Inspect output (native or synopsis) to unified fields.

    Native Inspect files report the precursor error in m/z units; it is
    scaled by the charge to get Da.
    """
    record = map_columns(row, INSPECT_COLUMN_MAPPING, INSPECT_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []

    delm_mz = to_float(record.pop("delm_mz", None))
    charge = to_int(record.get("charge"))
    if "delm_da" not in record and delm_mz is not None and charge:
        record["delm_da"] = str(delm_mz * charge)
    return record
