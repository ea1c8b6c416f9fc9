from .exceptions import (
    CatalogLoadError,
    EnzymeNotSupported,
    FormatUndetermined,
    InvalidResidue,
    ResultTypeNotSupported,
    UnknownModificationName,
    UnknownModificationSymbol,
)
from .utils import CleavageStateCalculator, PeptideMassCalculator
from .data import (
    DiagnosticKind,
    DiagnosticsChannel,
    ModificationCatalog,
    ModificationDefinition,
    ModificationType,
    PSM,
)
from .parsers import ReaderFactory, ReaderOptions, ReaderState, ResultType, ResultTypeDetector

__version__ = "0.1.0"

__all__ = [
    "CatalogLoadError",
    "EnzymeNotSupported",
    "FormatUndetermined",
    "InvalidResidue",
    "ResultTypeNotSupported",
    "UnknownModificationName",
    "UnknownModificationSymbol",
    "CleavageStateCalculator",
    "PeptideMassCalculator",
    "DiagnosticKind",
    "DiagnosticsChannel",
    "ModificationCatalog",
    "ModificationDefinition",
    "ModificationType",
    "PSM",
    "ReaderFactory",
    "ReaderOptions",
    "ReaderState",
    "ResultType",
    "ResultTypeDetector",
]
