"""Tests for reading search tool parameter files."""

import pytest

from phrp_utils.data.modification import ModificationType
from phrp_utils.parsers.params import (
    parse_enzyme,
    parse_mass_or_formula,
    parse_modification_spec,
    parse_tolerance,
    read_search_engine_parameters,
)

MSGFPLUS_PARAMS = """\
#MS-GF+ parameter file
EnzymeID=1                  # Trypsin
PrecursorMassTolerance=20ppm
NumTolerableTermini=2
MaxNumMods=3
StaticMod=None
StaticMod=C2H3NO, C, fix, any, Carbamidomethyl
DynamicMod=O1, M, opt, any, Oxidation
DynamicMod=C2H2O, *, opt, Prot-N-term, Acetyl
DynamicMod=M
"""

INSPECT_PARAMS = """\
spectra,/data/Dataset.mzXML
instrument,ESI-ION-TRAP
protease,Trypsin
mod,+57.021464,C,fix
mod,15.994915,M
mod,42.010565,*,nterminal,Acetyl
PMTolerance,2.5
"""


class TestValues:
    """Test parsing of single setting values."""

    def test_mass_or_formula(self):
        assert parse_mass_or_formula("57.021464") == 57.021464
        assert parse_mass_or_formula("C2H3NO") == pytest.approx(57.021464, abs=1e-5)
        assert parse_mass_or_formula("O1") == pytest.approx(15.994915, abs=1e-5)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("20ppm", (0.0, 20.0)),
            ("10 ppm, 20 ppm", (0.0, 10.0)),
            ("0.5Da", (0.5, 0.0)),
            ("2.5", (2.5, 0.0)),
            ("500 mmu", (0.5, 0.0)),
            ("wide", (0.0, 0.0)),
        ],
    )
    def test_tolerance(self, text, expected):
        assert parse_tolerance(text) == pytest.approx(expected)

    def test_enzyme(self):
        assert parse_enzyme("Trypsin(KR/P) 1 1 KR P") == "Trypsin"
        assert parse_enzyme("1") == "1"
        assert parse_enzyme("") == "trypsin"


class TestModificationSpec:
    """Test MS-GF+ style modification specs."""

    def test_static(self):
        definition = parse_modification_spec(["57.021464", "C", "fix", "any", "Carbamidomethyl"])
        assert definition.kind == ModificationType.STATIC
        assert definition.target_residues == "C"
        # Too long to be a mass correction tag
        assert definition.mass_correction_tag == ""

    def test_dynamic_n_terminal(self):
        definition = parse_modification_spec(["42.010565", "*", "opt", "N-term", "Acetyl"])
        assert definition.kind == ModificationType.DYNAMIC
        assert definition.target_residues == "<"
        assert definition.mass_correction_tag == "Acetyl"

    def test_static_protein_terminus(self):
        definition = parse_modification_spec(["42.010565", "*", "fix", "Prot-N-term"])
        assert definition.kind == ModificationType.PROTEIN_TERMINUS_STATIC
        assert definition.target_residues == "["

    def test_fixed_terminal_on_residue_is_dynamic(self):
        definition = parse_modification_spec(["-17.026549", "Q", "fix", "N-term"])
        assert definition.kind == ModificationType.DYNAMIC

    def test_too_short(self):
        with pytest.raises(ValueError):
            parse_modification_spec(["57.021464"])


class TestReadParameters:
    """Test reading whole parameter files."""

    def test_msgfplus(self, write_text, catalog):
        path = write_text("MSGFPlus_Params.txt", MSGFPLUS_PARAMS)
        params = read_search_engine_parameters(path, "msgfplus")

        assert params.enzyme == "1"
        assert params.precursor_mass_tolerance_ppm == 20.0
        assert params.min_number_termini == 2
        assert params.parameters["MaxNumMods"] == "3"
        # StaticMod=None and the incomplete DynamicMod line are skipped
        assert len(params.modifications) == 3

        entries = params.apply_to_catalog(catalog)
        assert [d.mass_correction_tag for d in entries] == ["IodoAcet", "Plus1Oxy", "Acetyl"]
        assert [d.symbol for d in entries] == ["-", "*", "#"]
        assert entries[2].target_residues == "["
        assert len(catalog) == 3

    def test_inspect(self, write_text):
        path = write_text("inspect_input.txt", INSPECT_PARAMS)
        params = read_search_engine_parameters(path, "inspect")

        assert params.enzyme == "Trypsin"
        assert params.precursor_mass_tolerance_da == 2.5
        kinds = [d.kind for d in params.modifications]
        assert kinds == [ModificationType.STATIC, ModificationType.DYNAMIC, ModificationType.DYNAMIC]
        assert params.modifications[2].target_residues == "<"
        assert params.parameters["instrument"] == "ESI-ION-TRAP"

    def test_unnamed_unknown_mass(self, write_text, catalog):
        """Masses without a known tag get the catalog's next unknown tag."""
        path = write_text("params.txt", "DynamicMod=12.3456, K, opt, any\n")
        entries = read_search_engine_parameters(path).apply_to_catalog(catalog)
        assert entries[0].mass_correction_tag == "UnkMod00"

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_search_engine_parameters(str(tmp_path / "missing.txt"))
