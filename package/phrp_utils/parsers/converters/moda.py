"""MODa parser function."""

import logging

from ..constants import MODA_COLUMN_MAPPING, MODA_SCORE_COLUMNS
from .utils import map_columns

logger = logging.getLogger(__name__)


def moda_parser(row: dict) -> dict:
    """Map one line of MODa output; peptides carry integer mass offsets such as ``M+16``."""
    record = map_columns(row, MODA_COLUMN_MAPPING, MODA_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []
    return record
