from .constants import DEFAULT_TSV_FALLBACK, FILENAME_SUFFIXES
from .converters import ResultType
from .detection import ResultTypeDetector, detect_result_type
from .params import SearchEngineParameters, read_search_engine_parameters
from .reader import ReaderFactory, ReaderOptions, ReaderState
from .sequence import ModificationAnnotation, parse_modified_sequence

__all__ = [
    "DEFAULT_TSV_FALLBACK",
    "FILENAME_SUFFIXES",
    "ResultType",
    "ResultTypeDetector",
    "detect_result_type",
    "SearchEngineParameters",
    "read_search_engine_parameters",
    "ReaderFactory",
    "ReaderOptions",
    "ReaderState",
    "ModificationAnnotation",
    "parse_modified_sequence",
]
