"""TopPIC parser function."""

import logging

from ..constants import TOPPIC_COLUMN_MAPPING, TOPPIC_SCORE_COLUMNS
from .utils import map_columns

logger = logging.getLogger(__name__)


def toppic_parser(row: dict) -> dict:
    """
    Map one line of TopPIC output to unified fields.

    Proteoforms use ``(ABC)[mass]`` groups for mass shifts that could sit
    on any residue of the group; they are kept as-is for the sequence
    parser.
    """
    record = map_columns(row, TOPPIC_COLUMN_MAPPING, TOPPIC_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []
    return record
