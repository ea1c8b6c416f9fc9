"""Tests for the diagnostics channel."""

import logging

from phrp_utils.data.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DiagnosticsChannel,
)


class TestDiagnosticsChannel:
    def test_levels(self, diagnostics):
        diagnostics.info(DiagnosticKind.AUTO_DEFINED_MODIFICATION, "defined")
        diagnostics.warning(DiagnosticKind.MASS_DISAGREEMENT, "differs", payload={"reported": 1.0})
        diagnostics.error(DiagnosticKind.READ_ERROR, "broken")

        assert len(diagnostics) == 3
        assert [d.kind for d in diagnostics.warnings] == [DiagnosticKind.MASS_DISAGREEMENT]
        assert [d.kind for d in diagnostics.errors] == [DiagnosticKind.READ_ERROR]
        assert diagnostics.of_kind(DiagnosticKind.MASS_DISAGREEMENT)[0].payload == {"reported": 1.0}

    def test_drain(self, diagnostics):
        """Draining returns records in order and empties the channel."""
        diagnostics.warning(DiagnosticKind.INVALID_RESIDUE, "first")
        diagnostics.warning(DiagnosticKind.MALFORMED_RECORD, "second")
        assert [d.message for d in diagnostics.drain()] == ["first", "second"]
        assert len(diagnostics) == 0
        assert diagnostics.drain() == []

    def test_str_location(self):
        diagnostic = Diagnostic(
            DiagnosticKind.INVALID_RESIDUE, DiagnosticLevel.WARNING, "bad residue",
            path="Dataset_syn.txt", line_number=5,
        )
        assert str(diagnostic) == "Dataset_syn.txt:5: bad residue"
        assert str(Diagnostic(DiagnosticKind.READ_ERROR, DiagnosticLevel.ERROR, "oops")) == "oops"

    def test_mirrored_to_logger(self, caplog):
        channel = DiagnosticsChannel()
        with caplog.at_level(logging.INFO, logger="phrp_utils.data.diagnostics"):
            channel.warning(DiagnosticKind.MASS_DISAGREEMENT, "Mass differs by 0.2 Da", path="x.txt")
        assert "x.txt: Mass differs by 0.2 Da" in caplog.text
        assert caplog.records[0].levelno == logging.WARNING

    def test_silent(self, caplog, diagnostics):
        with caplog.at_level(logging.INFO, logger="phrp_utils.data.diagnostics"):
            diagnostics.error(DiagnosticKind.READ_ERROR, "quiet")
        assert caplog.records == []
        assert len(diagnostics) == 1
