"""MS-GF+ (and legacy MSGFDB) parser function."""

import logging

from ..constants import MSGFPLUS_COLUMN_MAPPING, MSGFPLUS_SCORE_COLUMNS
from .utils import map_columns, split_proteins, strip_pre_post

logger = logging.getLogger(__name__)


def msgfplus_parser(row: dict) -> dict:
    """
    Map one line of MS-GF+ output to unified fields.

    Handles the native ``.tsv`` layout (``ScanNum``, ``Precursor``,
    ``PrecursorError(ppm)``, proteins joined by ``;`` with ``(pre=,post=)``
    suffixes) as well as synopsis files.

    Parameters
    ----------
    row: dict
        Column name -> text for one data line.

    Return
    ------
    dict
        Unified fields; see ``ResultType.parse``.
    """
    record = map_columns(row, MSGFPLUS_COLUMN_MAPPING, MSGFPLUS_SCORE_COLUMNS)
    record["proteins"] = [
        strip_pre_post(protein) for protein in split_proteins(record.pop("protein", ""))
    ]
    return record
