from .mass import (
    MASS_C13_C12_DIFFERENCE,
    MASS_DIGITS_OF_PRECISION,
    MASS_HYDROGEN,
    MASS_OXYGEN,
    MASS_PROTON,
    MASS_WATER,
    RESIDUE_MASSES,
    PeptideMassCalculator,
)
from .cleavage import (
    ENZYME_RULES,
    CleavageRule,
    CleavageState,
    CleavageStateCalculator,
    TerminusState,
    get_cleavage_rule,
    split_prefix_and_suffix,
)
from .proforma import parse_peptidoform, to_proforma

__all__ = [
    "MASS_C13_C12_DIFFERENCE",
    "MASS_DIGITS_OF_PRECISION",
    "MASS_HYDROGEN",
    "MASS_OXYGEN",
    "MASS_PROTON",
    "MASS_WATER",
    "RESIDUE_MASSES",
    "PeptideMassCalculator",
    "ENZYME_RULES",
    "CleavageRule",
    "CleavageState",
    "CleavageStateCalculator",
    "TerminusState",
    "get_cleavage_rule",
    "split_prefix_and_suffix",
    "parse_peptidoform",
    "to_proforma",
]
