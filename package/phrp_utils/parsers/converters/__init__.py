from .base import ResultType
from .maxquant import convert_maxquant_sequence
from .mspathfinder import parse_modification_list

__all__ = ["ResultType", "convert_maxquant_sequence", "parse_modification_list"]
