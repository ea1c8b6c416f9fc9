"""Decide which search engine produced a result file."""

import logging
import os
from typing import Optional

from .constants import (
    DEFAULT_TSV_FALLBACK,
    FILENAME_SUFFIXES,
    GENERIC_SUFFIXES,
    HEADER_RULES,
    XTANDEM_XML_ROOT,
)
from .converters.base import ResultType
from .converters.utils import read_header

logger = logging.getLogger(__name__)


def _sniff_xml_root(path: str, size: int = 4096) -> str:
    try:
        with open(path, errors="replace") as f:
            return f.read(size)
    except OSError as err:
        logger.warning(f"Could not read {path}: {err}")
        return ""


class ResultTypeDetector:
    """
    Classify a result file by its name and, when the name is ambiguous, its header.

    Detection goes through these steps in order:

    1. ``.xml`` files are X!Tandem output when the root element is ``<bioml``.
    2. An engine-specific filename suffix (``FILENAME_SUFFIXES``) decides.
    3. Generic synopsis/first-hits suffixes and unknown names are classified
       by header tokens (``HEADER_RULES``).
    4. A ``.tsv`` file whose header is readable but matches no rule is read
       as MS-GF+ output (``tsv_fallback``). Set it to None to disable this.

    Anything else is ``ResultType.UNKNOWN``.

    Examples
    --------
    >>> ResultTypeDetector().detect("Dataset_msgfplus.tsv")
    <ResultType.MSGFPLUS: ...>
    """

    def __init__(self, tsv_fallback: Optional[str] = DEFAULT_TSV_FALLBACK):
        self.tsv_fallback = tsv_fallback
        self.fallback_used = False

    @staticmethod
    def detect_by_header(header: list) -> ResultType:
        columns = set(header)
        for required, any_of, label in HEADER_RULES:
            if required <= columns and (not any_of or any_of & columns):
                return ResultType.select(label)
        return ResultType.UNKNOWN

    @staticmethod
    def detect_by_name(path: str) -> ResultType:
        name = os.path.basename(path).lower()
        for suffix, label in FILENAME_SUFFIXES:
            if name.endswith(suffix.lower()):
                return ResultType.select(label)
        return ResultType.UNKNOWN

    def detect(self, path: str) -> ResultType:
        self.fallback_used = False
        name = os.path.basename(path).lower()

        if name.endswith(".xml"):
            if XTANDEM_XML_ROOT in _sniff_xml_root(path):
                return ResultType.XTANDEM_XML
            return ResultType.UNKNOWN

        result_type = self.detect_by_name(path)
        if result_type is not ResultType.UNKNOWN:
            return result_type

        header = read_header(path)
        result_type = self.detect_by_header(header)
        if result_type is not ResultType.UNKNOWN:
            return result_type

        is_generic = any(name.endswith(suffix) for suffix in GENERIC_SUFFIXES)
        if header and name.endswith(".tsv") and not is_generic and self.tsv_fallback:
            logger.info(
                f"No engine-specific columns in {os.path.basename(path)}; "
                f"reading it as {self.tsv_fallback} output"
            )
            self.fallback_used = True
            return ResultType.select(self.tsv_fallback)

        return ResultType.UNKNOWN


def detect_result_type(path: str, tsv_fallback: Optional[str] = DEFAULT_TSV_FALLBACK) -> ResultType:
    """Shortcut for ``ResultTypeDetector(tsv_fallback).detect(path)``."""
    return ResultTypeDetector(tsv_fallback).detect(path)
