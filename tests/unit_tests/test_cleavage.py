"""Tests for peptide notation splitting and cleavage state classification."""

import pytest

from phrp_utils.exceptions import EnzymeNotSupported
from phrp_utils.utils.cleavage import (
    ENZYME_RULES,
    CleavageState,
    CleavageStateCalculator,
    TerminusState,
    extract_clean_sequence,
    get_cleavage_rule,
    split_prefix_and_suffix,
)


class TestSplitPrefixAndSuffix:
    """Test X.SEQUENCE.Y splitting."""

    def test_both_flanks(self):
        assert split_prefix_and_suffix("A.BCDE.F") == ("A", "BCDE", "F")

    def test_missing_suffix(self):
        """A missing trailing flank is empty, not an error."""
        assert split_prefix_and_suffix("A.BCDE") == ("A", "BCDE", "")

    def test_missing_prefix(self):
        assert split_prefix_and_suffix("BCDE.F") == ("", "BCDE", "F")

    def test_no_dots(self):
        assert split_prefix_and_suffix("PEPTIDE") == ("", "PEPTIDE", "")

    def test_modified_sequence_keeps_masses(self):
        """Periods inside modification masses stay in the sequence."""
        assert split_prefix_and_suffix("K.PEPM+15.995K.A") == ("K", "PEPM+15.995K", "A")

    def test_terminus_markers(self):
        assert split_prefix_and_suffix("-.PEPTIDE.-") == ("-", "PEPTIDE", "-")

    @pytest.mark.parametrize(
        "peptide",
        ["M+15.995PEPTIDE", "PEPTIDEK+0.984", "PEPT+79.966IDE"],
    )
    def test_decimal_point_is_not_a_flank(self, peptide):
        """A lone period inside a modification mass leaves the sequence whole."""
        assert split_prefix_and_suffix(peptide) == ("", peptide, "")

    def test_single_period_at_edges(self):
        assert split_prefix_and_suffix(".PEPTIDE") == ("", "PEPTIDE", "")
        assert split_prefix_and_suffix("PEPTIDE.") == ("", "PEPTIDE", "")

    def test_double_period_flank(self):
        assert split_prefix_and_suffix("..PEPTIDE.R") == ("", "PEPTIDE", "R")
        assert split_prefix_and_suffix("K.PEPTIDE..") == ("K", "PEPTIDE", "")

    def test_staticmethod_on_calculator(self):
        assert CleavageStateCalculator.split_prefix_and_suffix("A.BCDE.F") == ("A", "BCDE", "F")

    def test_extract_clean_sequence(self):
        assert extract_clean_sequence("PEPT*IDE+79.966") == "PEPTIDE"


class TestTrypticTermini:
    """Test counting of enzyme-consistent peptide ends."""

    def test_fully_tryptic(self, cleavage_calculator):
        assert cleavage_calculator.count_tryptic_termini("K", "ACDEFK", "A") == 2

    def test_proline_rule(self, cleavage_calculator):
        """K followed by P is not a tryptic site."""
        assert cleavage_calculator.count_tryptic_termini("K", "PEPTIDE", "R") == 0

    def test_protein_terminus_counts(self, cleavage_calculator):
        assert cleavage_calculator.count_tryptic_termini("-", "PEPTIDER", "A") == 2

    def test_non_tryptic(self, cleavage_calculator):
        assert cleavage_calculator.count_tryptic_termini("A", "PEPTIDE", "G") == 0

    def test_one_end(self, cleavage_calculator):
        assert cleavage_calculator.count_tryptic_termini("R", "ACDEF", "G") == 1

    def test_other_enzyme(self, cleavage_calculator):
        """An enzyme rule can be given per call."""
        assert cleavage_calculator.count_tryptic_termini("F", "AAAW", "A", enzyme_rule="chymotrypsin") == 2
        assert cleavage_calculator.count_tryptic_termini("F", "AAAW", "A") == 0

    def test_empty_sequence(self, cleavage_calculator):
        assert cleavage_calculator.count_tryptic_termini("K", "", "A") == 0


class TestCleavageState:
    """Test full, partial and non-specific classification."""

    def test_full(self, cleavage_calculator):
        assert cleavage_calculator.compute_cleavage_state("K", "ACDEFK", "A") == CleavageState.FULL

    def test_partial(self, cleavage_calculator):
        assert cleavage_calculator.compute_cleavage_state("A", "ACDEFK", "A") == CleavageState.PARTIAL

    def test_non_specific(self, cleavage_calculator):
        assert cleavage_calculator.compute_cleavage_state("A", "ACDEF", "A") == CleavageState.NON_SPECIFIC

    def test_protein_n_terminus_judged_on_c_end(self, cleavage_calculator):
        assert cleavage_calculator.compute_cleavage_state("-", "ACDEF", "A") == CleavageState.NON_SPECIFIC
        assert cleavage_calculator.compute_cleavage_state("-", "ACDEFK", "A") == CleavageState.FULL

    def test_whole_protein(self, cleavage_calculator):
        assert cleavage_calculator.compute_cleavage_state("-", "ACDEF", "-") == CleavageState.FULL


class TestTerminusState:
    """Test protein terminus classification."""

    def test_states(self, cleavage_calculator):
        assert cleavage_calculator.compute_terminus_state("K", "A") == TerminusState.NONE
        assert cleavage_calculator.compute_terminus_state("-", "A") == TerminusState.PROTEIN_N_TERMINUS
        assert cleavage_calculator.compute_terminus_state("K", "-") == TerminusState.PROTEIN_C_TERMINUS
        assert cleavage_calculator.compute_terminus_state("-", "-") == TerminusState.PROTEIN_N_AND_C_TERMINUS

    def test_missing_flanks(self, cleavage_calculator):
        """Missing flanks are unknown, not protein termini."""
        assert cleavage_calculator.compute_terminus_state("", "") == TerminusState.NONE
        assert cleavage_calculator.compute_terminus_state("-", "") == TerminusState.PROTEIN_N_TERMINUS
        assert cleavage_calculator.count_tryptic_termini("", "PEPTIDEK", "") == 0
        assert cleavage_calculator.compute_cleavage_state("", "PEPTIDEK", "") == CleavageState.NON_SPECIFIC


class TestMissedCleavages:
    """Test internal cleavage site counting."""

    def test_count(self, cleavage_calculator):
        # K-R is a site, R-P is blocked, the final K is not internal
        assert cleavage_calculator.compute_missed_cleavages("AKRPEK") == 1

    def test_none(self, cleavage_calculator):
        assert cleavage_calculator.compute_missed_cleavages("PEPTIDEK") == 0


class TestEnzymeRules:
    """Test enzyme lookup."""

    def test_aliases(self):
        assert get_cleavage_rule("1") is ENZYME_RULES["trypsin"]
        assert get_cleavage_rule("Trypsin") is ENZYME_RULES["trypsin"]
        assert get_cleavage_rule("Lys-C") is ENZYME_RULES["lysc"]

    def test_unknown_enzyme(self):
        with pytest.raises(EnzymeNotSupported) as excinfo:
            CleavageStateCalculator("pepsin_x")
        assert "trypsin" in excinfo.value.allowed_values

    def test_no_proline_rule(self):
        rule = get_cleavage_rule("trypsin_no_proline_rule")
        assert rule.cleaves("K", "P")
        assert not get_cleavage_rule("trypsin").cleaves("K", "P")

    def test_aspn_cleaves_before_d(self):
        rule = get_cleavage_rule("aspn")
        assert rule.cleaves("A", "D")
        assert not rule.cleaves("D", "A")
