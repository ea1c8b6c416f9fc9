from .modification import (
    LAST_RESORT_SYMBOL,
    NO_SYMBOL,
    ModificationDefinition,
    ModificationType,
)
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticLevel, DiagnosticsChannel
from .catalog import DEFAULT_MASS_CORRECTION_TAGS, DEFAULT_MODIFICATION_SYMBOLS, ModificationCatalog
from .psm import PSM, ModifiedResidue, ProteinInfo

__all__ = [
    "LAST_RESORT_SYMBOL",
    "NO_SYMBOL",
    "ModificationDefinition",
    "ModificationType",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLevel",
    "DiagnosticsChannel",
    "DEFAULT_MASS_CORRECTION_TAGS",
    "DEFAULT_MODIFICATION_SYMBOLS",
    "ModificationCatalog",
    "PSM",
    "ModifiedResidue",
    "ProteinInfo",
]
