"""MSAlign parser function."""

import logging

from ..constants import MSALIGN_COLUMN_MAPPING, MSALIGN_SCORE_COLUMNS
from .utils import map_columns

logger = logging.getLogger(__name__)


def msalign_parser(row: dict) -> dict:
    record = map_columns(row, MSALIGN_COLUMN_MAPPING, MSALIGN_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []
    return record
