"""Structured diagnostics emitted while building catalogs and reading PSMs."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class DiagnosticLevel(Enum):
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class DiagnosticKind(Enum):
    FORMAT_UNDETERMINED = "format_undetermined"
    CATALOG_LOAD_ERROR = "catalog_load_error"
    INVALID_RESIDUE = "invalid_residue"
    MASS_DISAGREEMENT = "mass_disagreement"
    AUTO_DEFINED_MODIFICATION = "auto_defined_modification"
    UNKNOWN_MODIFICATION = "unknown_modification"
    MALFORMED_RECORD = "malformed_record"
    READ_ERROR = "read_error"


@dataclass
class Diagnostic:
    kind: DiagnosticKind
    level: DiagnosticLevel
    message: str
    path: Optional[str] = None
    line_number: Optional[int] = None
    raw_text: Optional[str] = None
    payload: dict = field(default_factory=dict)

    def __str__(self):
        location = ""
        if self.path is not None:
            location = f"{self.path}"
            if self.line_number is not None:
                location += f":{self.line_number}"
            location += ": "
        return f"{location}{self.message}"


class DiagnosticsChannel:
    """
    An ordered stream of diagnostics.

    Records are kept until drained, and every record is mirrored to the
    module logger at its own level.

    Examples
    --------
    >>> channel = DiagnosticsChannel()
    >>> channel.warning(DiagnosticKind.MASS_DISAGREEMENT, "Mass differs by 0.2 Da")
    >>> [d.kind for d in channel.drain()]
    [<DiagnosticKind.MASS_DISAGREEMENT: 'mass_disagreement'>]
    """

    def __init__(self, log: bool = True):
        self.records = []
        self.log = log

    def __iter__(self):
        return iter(list(self.records))

    def __len__(self):
        return len(self.records)

    def emit(self, diagnostic: Diagnostic):
        self.records.append(diagnostic)
        if self.log:
            logger.log(diagnostic.level.value, str(diagnostic))

    def _emit(self, level, kind, message, **kwargs):
        self.emit(Diagnostic(kind=kind, level=level, message=message, **kwargs))

    def info(self, kind: DiagnosticKind, message: str, **kwargs):
        self._emit(DiagnosticLevel.INFO, kind, message, **kwargs)

    def warning(self, kind: DiagnosticKind, message: str, **kwargs):
        self._emit(DiagnosticLevel.WARNING, kind, message, **kwargs)

    def error(self, kind: DiagnosticKind, message: str, **kwargs):
        self._emit(DiagnosticLevel.ERROR, kind, message, **kwargs)

    def of_kind(self, kind: DiagnosticKind) -> list:
        return [d for d in self.records if d.kind == kind]

    @property
    def errors(self) -> list:
        return [d for d in self.records if d.level == DiagnosticLevel.ERROR]

    @property
    def warnings(self) -> list:
        return [d for d in self.records if d.level == DiagnosticLevel.WARNING]

    def drain(self) -> list:
        """Return all pending diagnostics and clear the channel."""
        records, self.records = self.records, []
        return records
