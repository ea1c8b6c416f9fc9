"""Tests for the modification catalog: lookup, auto-definition and file input/output."""

import pandas as pd
import pytest

from phrp_utils.data.catalog import MOD_SUMMARY_COLUMNS, ModificationCatalog
from phrp_utils.data.diagnostics import DiagnosticKind, DiagnosticsChannel
from phrp_utils.data.modification import (
    LAST_RESORT_SYMBOL,
    NO_SYMBOL,
    ModificationDefinition,
    ModificationType,
)
from phrp_utils.exceptions import CatalogLoadError


class TestAutoDefinition:
    """Test resolution of masses without a catalog entry."""

    def test_auto_define(self, catalog, diagnostics):
        """An unseen mass gets the first unknown tag and the first pool symbol."""
        definition = catalog.resolve_by_tag_or_mass(None, 12.345, residues="M", mass_digits=3)
        assert definition.auto_defined
        assert definition.mass_correction_tag == "UnkMod00"
        assert definition.symbol == "*"
        assert definition.target_residues == "M"

        notices = diagnostics.of_kind(DiagnosticKind.AUTO_DEFINED_MODIFICATION)
        assert len(notices) == 1
        assert notices[0].payload == {"tag": "UnkMod00", "mass": 12.345, "symbol": "*"}

    def test_idempotent(self, catalog):
        """Resolving the same unseen mass twice returns the same definition."""
        first = catalog.resolve_by_tag_or_mass(None, 12.345, residues="M", mass_digits=3)
        second = catalog.resolve_by_tag_or_mass(None, 12.345, residues="M", mass_digits=3)
        assert second is first
        assert len(catalog) == 1
        assert first.occurrence_count == 2

    def test_tags_and_symbols_advance(self, catalog):
        a = catalog.resolve_by_tag_or_mass(None, 10.5, residues="K")
        b = catalog.resolve_by_tag_or_mass(None, 20.5, residues="K")
        assert (a.mass_correction_tag, b.mass_correction_tag) == ("UnkMod00", "UnkMod01")
        assert (a.symbol, b.symbol) == ("*", "#")

    def test_symbol_pool_exhausted(self, diagnostics):
        """Once the pool is empty every new modification shares the last-resort symbol."""
        catalog = ModificationCatalog(modification_symbols="*#", diagnostics=diagnostics)
        symbols = [catalog.resolve_by_tag_or_mass(None, mass, residues="K").symbol for mass in (1.5, 2.5, 3.5, 4.5)]
        assert symbols == ["*", "#", LAST_RESORT_SYMBOL, LAST_RESORT_SYMBOL]

    def test_catalogs_are_independent(self):
        """Counters belong to the catalog, not the process."""
        first = ModificationCatalog(diagnostics=DiagnosticsChannel(log=False))
        second = ModificationCatalog(diagnostics=DiagnosticsChannel(log=False))
        first.resolve_by_tag_or_mass(None, 10.5, residues="K")
        first.resolve_by_tag_or_mass(None, 20.5, residues="K")
        definition = second.resolve_by_tag_or_mass(None, 30.5, residues="K")
        assert definition.mass_correction_tag == "UnkMod00"
        assert definition.symbol == "*"

    def test_n_terminal(self, catalog):
        definition = catalog.resolve_by_tag_or_mass(None, 42.011, residues="<", mass_digits=3)
        assert definition.target_residues == "<"
        assert definition.mass_correction_tag == "Acetyl"

    def test_standard_refinement(self, catalog):
        """Ammonia loss on Q is recognised before falling back to an unknown tag."""
        definition = catalog.resolve_by_tag_or_mass(None, -17.026549, residues="Q")
        assert definition.mass_correction_tag == "NH3_Loss"
        assert definition.auto_defined

    def test_known_mass_named_after_tag(self, catalog):
        """An unnamed mass that matches a mass correction tag takes that tag."""
        definition = catalog.resolve_by_tag_or_mass(None, 79.9663, residues="T", mass_digits=4)
        assert definition.mass_correction_tag == "Phosph"
        assert definition.auto_defined
        assert definition.symbol == "*"

    def test_known_tag_already_taken(self, catalog):
        """A tag held by another entry is not reused for a different modification."""
        catalog.add(ModificationDefinition("-", 79.966331, "S", ModificationType.STATIC, mass_correction_tag="Phosph"))
        definition = catalog.resolve_by_tag_or_mass(None, 79.9663, residues="T", mass_digits=4)
        assert definition.mass_correction_tag == "UnkMod00"

    def test_valid_tag_kept(self, catalog):
        definition = catalog.resolve_by_tag_or_mass("Acetyl", 42.010567, residues="<")
        assert definition.mass_correction_tag == "Acetyl"


class TestLookup:
    """Test lookups against existing definitions."""

    @pytest.fixture
    def oxidation(self, catalog):
        return catalog.add(
            ModificationDefinition("*", 15.994915, "M", mass_correction_tag="Plus1Oxy")
        )

    def test_tag_first(self, catalog, oxidation):
        """An exact tag match wins over the mass."""
        assert catalog.resolve_by_tag_or_mass("Plus1Oxy", 99.0, residues="M") is oxidation
        assert oxidation.occurrence_count == 1

    def test_mass_match(self, catalog, oxidation):
        assert catalog.resolve_by_tag_or_mass(None, 15.9949, residues="M", mass_digits=4) is oxidation

    def test_residue_merge(self, catalog, oxidation):
        """A matching dynamic definition learns the new residue."""
        definition = catalog.resolve_by_tag_or_mass(None, 15.994915, residues="W")
        assert definition is oxidation
        assert oxidation.target_residues == "MW"

    def test_lookup_by_symbol(self, catalog, oxidation):
        assert catalog.lookup_by_symbol("*") is oxidation
        assert catalog.lookup_by_symbol("#") is None
        assert catalog.lookup_by_symbol(NO_SYMBOL) is None

    def test_lookup_by_mass_prefers_residue(self, catalog, oxidation):
        other = catalog.add(ModificationDefinition("#", 15.994915, "W", mass_correction_tag="Oxy_W"))
        assert catalog.lookup_by_mass(15.994915, residues="W") is other
        assert catalog.lookup_by_mass(15.994915, residues="M") is oxidation

    def test_lookup_by_name(self, catalog):
        assert catalog.lookup_mass_by_name("Phosph") == pytest.approx(79.966331)
        assert catalog.lookup_mass_by_name("oxidation") == pytest.approx(15.994915)
        assert catalog.lookup_tag_by_name("Phospho") == "Phosph"
        assert catalog.lookup_mass_by_name("NotAModification") is None

    def test_add_returns_existing(self, catalog, oxidation):
        duplicate = ModificationDefinition("#", 15.994915, "M", mass_correction_tag="Plus1Oxy")
        assert catalog.add(duplicate) is oxidation
        assert len(catalog) == 1

    def test_symbol_not_reassigned(self, catalog, oxidation):
        """A symbol bound to another tag is not handed out again."""
        definition = catalog.add(ModificationDefinition("*", 79.966331, "STY", mass_correction_tag="Phosph"))
        assert definition.symbol != "*"

    def test_static_modifications(self, catalog, oxidation):
        static = catalog.add(
            ModificationDefinition("", 57.021465, "C", kind=ModificationType.STATIC, mass_correction_tag="IodoAcet")
        )
        assert static.symbol == NO_SYMBOL
        assert catalog.static_modifications() == [static]


class TestFiles:
    """Test reading definitions and tags, and writing the modification summary."""

    def test_load_definitions(self, write_text, diagnostics):
        path = write_text(
            "mods.txt",
            "Symbol\tMass\tResidues\tType\tTag\n"
            "*\t15.994915\tM\tD\tPlus1Oxy\n"
            "-\t57.021465\tC\tS\tIodoAcet\n"
            "-\t42.010567\t<\tS\tAcetyl\n",
        )
        catalog = ModificationCatalog.from_files(path, diagnostics=diagnostics)
        assert len(catalog) == 3
        assert catalog.lookup_by_symbol("*").mass_correction_tag == "Plus1Oxy"
        kinds = [d.kind for d in catalog]
        assert kinds == [
            ModificationType.DYNAMIC,
            ModificationType.STATIC,
            ModificationType.TERMINAL_PEPTIDE_STATIC,
        ]

    def test_tag_from_mass(self, write_text, diagnostics):
        """Rows without a tag get the known tag for their mass."""
        path = write_text("mods.txt", "#\t79.966331\tSTY\n")
        catalog = ModificationCatalog.from_files(path, diagnostics=diagnostics)
        assert catalog.lookup_by_symbol("#").mass_correction_tag == "Phosph"

    def test_malformed_definitions(self, write_text, diagnostics):
        path = write_text("mods.txt", "*\t15.994915\tM\n**\tabc\tM\n")
        with pytest.raises(CatalogLoadError) as excinfo:
            ModificationCatalog.from_files(path, diagnostics=diagnostics)
        assert excinfo.value.line_number == 2
        assert excinfo.value.line == "**\tabc\tM"
        assert excinfo.value.path == path

    def test_isotopic_needs_atom(self, write_text, diagnostics):
        path = write_text("mods.txt", "*\t15.994915\tM\n-\t0.997035\tK\tI\tIso_N15\n")
        with pytest.raises(CatalogLoadError):
            ModificationCatalog.from_files(path, diagnostics=diagnostics)

    def test_missing_file(self, tmp_path, diagnostics):
        with pytest.raises(CatalogLoadError):
            ModificationCatalog.from_files(str(tmp_path / "missing.txt"), diagnostics=diagnostics)

    def test_load_mass_correction_tags(self, write_text, diagnostics):
        path = write_text("tags.txt", "Name\tMass\nMyTag\t12.5\n\nTMT6Tag\t229.1629\n")
        catalog = ModificationCatalog.from_files(mass_correction_tags_path=path, diagnostics=diagnostics)
        assert catalog.lookup_mass_by_name("MyTag") == 12.5
        assert catalog.mass_correction_tags["TMT6Tag"] == 229.1629

    def test_invalid_tag(self, write_text, diagnostics):
        path = write_text("tags.txt", "Way too long\t12.5\n")
        with pytest.raises(CatalogLoadError):
            ModificationCatalog.from_files(mass_correction_tags_path=path, diagnostics=diagnostics)

    def test_write_mod_summary(self, tmp_path, catalog):
        catalog.add(ModificationDefinition("*", 15.994915, "M", mass_correction_tag="Plus1Oxy"))
        catalog.resolve_by_tag_or_mass(None, 10.5, residues="K")
        path = tmp_path / "Dataset_ModSummary.txt"
        catalog.write_mod_summary(str(path))

        summary = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)
        assert list(summary.columns) == MOD_SUMMARY_COLUMNS
        assert list(summary["Mass_Correction_Tag"]) == ["Plus1Oxy", "UnkMod00"]
        assert list(summary["Modification_Symbol"]) == ["*", "#"]
