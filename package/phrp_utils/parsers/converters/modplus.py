"""MODPlus parser function."""

import logging

from ..constants import MODPLUS_COLUMN_MAPPING, MODPLUS_SCORE_COLUMNS
from .utils import map_columns, split_proteins

logger = logging.getLogger(__name__)


def modplus_parser(row: dict) -> dict:
    record = map_columns(row, MODPLUS_COLUMN_MAPPING, MODPLUS_SCORE_COLUMNS)
    record["proteins"] = split_proteins(record.pop("protein", ""))
    return record
