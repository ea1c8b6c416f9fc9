"""MSPathFinder parser function."""

import logging
import re

from ..constants import MSPATHFINDER_COLUMN_MAPPING, MSPATHFINDER_SCORE_COLUMNS
from .utils import map_columns, to_int

logger = logging.getLogger(__name__)

_UNMODIFIED = re.compile(r"^[A-Z]+$")


def parse_modification_list(text: str) -> list:
    """
    Split an MSPathFinder modification list such as ``Oxidation 7,Acetyl 0``.

    Return
    ------
    list
        ``(name, position)`` tuples; position 0 is the N-terminus.
    """
    modifications = []
    for item in str(text).split(","):
        item = item.strip()
        if not item:
            continue
        name, _, position = item.rpartition(" ")
        position = to_int(position)
        if not name or position is None:
            raise ValueError(f"Malformed MSPathFinder modification '{item}'")
        modifications.append((name.strip(), position))
    return modifications


def mspathfinder_parser(row: dict) -> dict:
    """
    Map one line of MSPathFinder output to unified fields.

    The native file reports the clean sequence with the flanking residues
    in separate ``Pre``/``Post`` columns and the modifications as names
    with positions; both are folded into the unified record.
    """
    record = map_columns(row, MSPATHFINDER_COLUMN_MAPPING, MSPATHFINDER_SCORE_COLUMNS)
    record["proteins"] = [record.pop("protein")] if "protein" in record else []

    sequence = record.get("peptide", "")
    prefix = record.pop("prefix", "")
    suffix = record.pop("suffix", "")
    if sequence and "." not in sequence and (prefix or suffix):
        record["peptide"] = f"{prefix or '-'}.{sequence}.{suffix or '-'}"

    # Synopsis files already carry modification symbols in the sequence
    modifications = record.pop("modifications", "")
    if modifications and _UNMODIFIED.match(sequence):
        record["modifications"] = parse_modification_list(modifications)
    return record
