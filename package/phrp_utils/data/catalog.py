"""The set of modifications known for one job, with lookup and auto-definition."""

import logging
import os
from collections import deque
from typing import Optional

import pandas as pd

from ..exceptions import CatalogLoadError
from ..utils.mass import MASS_DIGITS_OF_PRECISION
from .diagnostics import DiagnosticKind, DiagnosticsChannel
from .modification import (
    C_TERMINAL_PEPTIDE,
    C_TERMINAL_PROTEIN,
    LAST_RESORT_SYMBOL,
    N_TERMINAL_PEPTIDE,
    N_TERMINAL_PROTEIN,
    NO_AFFECTED_ATOM,
    NO_SYMBOL,
    TERMINUS_MARKERS,
    UNKNOWN_TAG,
    ModificationDefinition,
    ModificationType,
    is_valid_mass_correction_tag,
)

logger = logging.getLogger(__name__)

# No letters, digits, brackets, periods or signs: those carry meaning in peptide strings
DEFAULT_MODIFICATION_SYMBOLS = "*#@$&!%~^=?`'\""

DEFAULT_MASS_CORRECTION_TAGS = {
    "Acetyl": 42.010567,
    "Bromo": 77.910507,
    "Carbamyl": 43.005814,
    "Cyano": 24.995249,
    "Cystnyl": 119.004097,
    "Deamide": 0.984016,
    "Dimethyl": 28.0313,
    "Formyl": 27.994915,
    "Guanid": 42.021797,
    "Hexose": 162.052826,
    "IodoAcet": 57.021465,
    "Iso_N15": 0.997035,
    "itrac": 144.102066,
    "iTRAQ8": 304.205353,
    "Methyl": 14.01565,
    "MinusH2O": -18.010565,
    "NEM": 125.047676,
    "NH3_Loss": -17.026548,
    "None": 0.0,
    "One_O18": 2.004246,
    "Phosph": 79.966331,
    "Plus1Oxy": 15.994915,
    "Plus2Oxy": 31.989828,
    "Propnyl": 56.026215,
    "Pyro-cmC": 39.994915,
    "Sucinate": 116.010956,
    "TMT0Tag": 224.152481,
    "TMT6Tag": 229.162933,
    "TriMeth": 42.046951,
    "Two_O18": 4.008491,
    "Ubiq_02": 114.042931,
}

# Common modification names used by search engines, mapped to mass correction tags
MODIFICATION_NAME_ALIASES = {
    "acetyl": "Acetyl",
    "acetylation": "Acetyl",
    "ac": "Acetyl",
    "carbamidomethyl": "IodoAcet",
    "carbamidomethylation": "IodoAcet",
    "cam": "IodoAcet",
    "carbamyl": "Carbamyl",
    "carbamylation": "Carbamyl",
    "deamidated": "Deamide",
    "deamidation": "Deamide",
    "de": "Deamide",
    "dimethyl": "Dimethyl",
    "formyl": "Formyl",
    "methyl": "Methyl",
    "oxidation": "Plus1Oxy",
    "ox": "Plus1Oxy",
    "dioxidation": "Plus2Oxy",
    "phospho": "Phosph",
    "phosphorylation": "Phosph",
    "ph": "Phosph",
    "ammonia-loss": "NH3_Loss",
    "gln->pyro-glu": "NH3_Loss",
    "glu->pyro-glu": "MinusH2O",
    "dehydrated": "MinusH2O",
    "trimethyl": "TriMeth",
    "tmt6plex": "TMT6Tag",
    "itraq4plex": "itrac",
    "itraq8plex": "iTRAQ8",
}

# Artefacts checked before an unseen mass is auto-defined: (mass, residue, tag)
STANDARD_REFINEMENT_MODIFICATIONS = [
    (-17.026549, "Q", "NH3_Loss"),
    (-18.010565, "E", "MinusH2O"),
]

MOD_SUMMARY_COLUMNS = [
    "Modification_Symbol",
    "Modification_Mass",
    "Target_Residues",
    "Modification_Type",
    "Mass_Correction_Tag",
    "Occurrence_Count",
]

_VALID_RESIDUE_CHARACTERS = set("ABCDEFGHIJKLMNOPQRSTUVWXYZ") | set(TERMINUS_MARKERS)


def masses_match(mass_1: float, mass_2: float, digits: int = MASS_DIGITS_OF_PRECISION) -> bool:
    return round(mass_1 - mass_2, digits) == 0


class ModificationCatalog:
    """
    The modifications known for one job.

    Symbols and unknown-modification tags are handed out per catalog, so
    independent catalogs never influence each other.

    Parameters
    ----------
    modification_symbols: str
        Ordered pool of display symbols for dynamic modifications.
    mass_correction_tags: dict
        Extra or overriding mass correction tags (name -> mass).
    diagnostics: DiagnosticsChannel
        Receives a notice for every auto-defined modification.
    """

    def __init__(
        self,
        modification_symbols: str = DEFAULT_MODIFICATION_SYMBOLS,
        mass_correction_tags: Optional[dict] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
    ):
        self.modifications = []
        self.mass_correction_tags = dict(DEFAULT_MASS_CORRECTION_TAGS)
        if mass_correction_tags:
            self.mass_correction_tags.update(mass_correction_tags)
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsChannel()

        symbols = [s for s in modification_symbols if s not in (LAST_RESORT_SYMBOL, NO_SYMBOL)]
        self._available_symbols = deque(dict.fromkeys(symbols))
        self._next_unknown_index = 0

    def __len__(self):
        return len(self.modifications)

    def __iter__(self):
        return iter(self.modifications)

    def __repr__(self):
        return f"ModificationCatalog({self.modifications})"

    @classmethod
    def from_files(
        cls,
        mod_definitions_path: Optional[str] = None,
        mass_correction_tags_path: Optional[str] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
        **kwargs,
    ) -> "ModificationCatalog":
        """
        Build a catalog from a modification definitions file and/or a mass correction tags file.

        Raises
        ------
        CatalogLoadError
            If either file is missing or malformed.
        """
        catalog = cls(diagnostics=diagnostics, **kwargs)
        if mass_correction_tags_path:
            catalog.load_mass_correction_tags(mass_correction_tags_path)
        if mod_definitions_path:
            catalog.load_modification_definitions(mod_definitions_path)
        return catalog

    # Symbols and tags

    def _symbol_owner(self, symbol: str) -> Optional[ModificationDefinition]:
        for modification in self.modifications:
            if modification.symbol == symbol:
                return modification
        return None

    def assign_symbol(self, definition: ModificationDefinition) -> str:
        """
        Give a definition its display symbol.

        Static, terminal-static and isotopic modifications carry no symbol.
        A symbol the definition already holds is kept when no other tag owns
        it; otherwise the next free symbol from the pool is taken, and once
        the pool is empty the last-resort symbol is used.
        """
        if definition.is_static or definition.kind == ModificationType.ISOTOPIC:
            definition.symbol = NO_SYMBOL
            return definition.symbol

        current = definition.symbol
        if current and current not in (NO_SYMBOL, LAST_RESORT_SYMBOL):
            owner = self._symbol_owner(current)
            if owner is None or owner is definition or (
                owner.mass_correction_tag == definition.mass_correction_tag
            ):
                self._claim_symbol(current)
                return current

        while self._available_symbols:
            symbol = self._available_symbols.popleft()
            if self._symbol_owner(symbol) is None:
                definition.symbol = symbol
                return symbol

        definition.symbol = LAST_RESORT_SYMBOL
        return definition.symbol

    def _claim_symbol(self, symbol: str):
        try:
            self._available_symbols.remove(symbol)
        except ValueError:
            pass

    def next_unknown_tag(self) -> str:
        while True:
            tag = f"{UNKNOWN_TAG}{self._next_unknown_index:02d}"
            self._next_unknown_index += 1
            if self.lookup_by_tag(tag) is None:
                return tag

    def lookup_mass_correction_tag_by_mass(
        self, mass: float, digits: int = MASS_DIGITS_OF_PRECISION
    ) -> Optional[str]:
        best_tag, best_delta = None, None
        for tag, tag_mass in self.mass_correction_tags.items():
            if not masses_match(tag_mass, mass, digits):
                continue
            delta = abs(tag_mass - mass)
            if best_delta is None or delta < best_delta:
                best_tag, best_delta = tag, delta
        return best_tag

    def lookup_tag_by_name(self, name: str) -> Optional[str]:
        """Mass correction tag for a tag name or a common modification name, case-insensitively."""
        key = name.strip().lower()
        for tag in self.mass_correction_tags:
            if tag.lower() == key:
                return tag
        for definition in self.modifications:
            if definition.mass_correction_tag.lower() == key:
                return definition.mass_correction_tag
        return MODIFICATION_NAME_ALIASES.get(key)

    def lookup_mass_by_name(self, name: str) -> Optional[float]:
        tag = self.lookup_tag_by_name(name)
        if tag is None:
            return None
        if tag in self.mass_correction_tags:
            return self.mass_correction_tags[tag]
        definition = self.lookup_by_tag(tag)
        if definition is not None:
            return definition.mass
        return DEFAULT_MASS_CORRECTION_TAGS.get(tag)

    # Lookups

    def lookup_by_symbol(self, symbol: str) -> Optional[ModificationDefinition]:
        if symbol in (NO_SYMBOL, ""):
            return None
        for definition in self.modifications:
            if definition.symbol == symbol:
                return definition
        return None

    def lookup_by_tag(self, tag: str) -> Optional[ModificationDefinition]:
        for definition in self.modifications:
            if definition.mass_correction_tag == tag:
                return definition
        return None

    def lookup_by_mass(
        self,
        mass: float,
        residues: str = "",
        kinds: tuple = (ModificationType.DYNAMIC, ModificationType.UNKNOWN),
        mass_digits: int = MASS_DIGITS_OF_PRECISION,
        affected_atom: str = NO_AFFECTED_ATOM,
    ) -> Optional[ModificationDefinition]:
        """
        Find an existing definition with a matching mass.

        Definitions targeting one of ``residues`` are preferred, then
        definitions without target residues, then dynamic definitions on
        any residue. Within a tier the closest mass wins.
        """
        candidates = [
            d
            for d in self.modifications
            if d.kind in kinds
            and d.affected_atom == affected_atom
            and masses_match(d.mass, mass, mass_digits)
        ]
        if not candidates:
            return None

        def closest(definitions):
            return min(definitions, key=lambda d: abs(d.mass - mass)) if definitions else None

        tiers = []
        if residues:
            tiers.append([d for d in candidates if any(d.targets(r) for r in residues)])
        tiers.append([d for d in candidates if not d.target_residues])
        tiers.append(
            [d for d in candidates if d.kind in (ModificationType.DYNAMIC, ModificationType.UNKNOWN)]
        )
        for tier in tiers:
            match = closest(tier)
            if match is not None:
                return match
        return None

    def static_modifications(self) -> list:
        return [d for d in self.modifications if d.is_static]

    def auto_defined(self) -> list:
        return [d for d in self.modifications if d.auto_defined]

    # Mutation

    def add(self, definition: ModificationDefinition, use_next_symbol: bool = False) -> ModificationDefinition:
        """
        Add a definition, returning the catalog's copy.

        An equivalent definition already present is returned instead; for
        dynamic and static modifications with the same mass, kind, tag and
        atom, the new target residues are merged into the existing entry.
        """
        for existing in self.modifications:
            if existing.equivalent(definition):
                return existing
            if existing.kind in (ModificationType.DYNAMIC, ModificationType.STATIC) and (
                existing.equivalent_mass_type_tag_atom(definition)
            ):
                for residue in definition.target_residues:
                    existing.add_target_residue(residue)
                return existing

        if use_next_symbol or not definition.symbol or self._symbol_conflicts(definition):
            if use_next_symbol:
                definition.symbol = ""
            self.assign_symbol(definition)
        else:
            self._claim_symbol(definition.symbol)

        self.modifications.append(definition)
        return definition

    def _symbol_conflicts(self, definition: ModificationDefinition) -> bool:
        if not definition.has_symbol or definition.symbol == LAST_RESORT_SYMBOL:
            return False
        owner = self._symbol_owner(definition.symbol)
        return owner is not None and owner.mass_correction_tag != definition.mass_correction_tag

    def resolve_by_tag_or_mass(
        self,
        tag: Optional[str],
        mass: float,
        kind: ModificationType = ModificationType.DYNAMIC,
        residues: str = "",
        mass_digits: int = MASS_DIGITS_OF_PRECISION,
        affected_atom: str = NO_AFFECTED_ATOM,
    ) -> ModificationDefinition:
        """
        Resolve an observed modification to a definition, defining it if needed.

        Parameters
        ----------
        tag: str, optional
            Mass correction tag; an exact match wins over any mass match.
        mass: float
            Observed modification mass.
        kind: ModificationType
            Kind of modification that is expected.
        residues: str
            Residue(s) carrying the modification; may contain terminus markers.
        mass_digits: int
            Decimal digits the observed mass is known to. Engines that report
            three decimals should not need six to match.

        Return
        ------
        ModificationDefinition
            The matched definition (its occurrence count incremented) or a
            newly auto-defined one. Resolution never fails.
        """
        kind = ModificationType(kind)
        if tag:
            definition = self.lookup_by_tag(tag)
            if definition is not None:
                self._record_match(definition, residues)
                return definition

        kinds = (kind, ModificationType.UNKNOWN) if kind == ModificationType.DYNAMIC else (kind,)
        definition = self.lookup_by_mass(
            mass, residues=residues, kinds=kinds, mass_digits=mass_digits, affected_atom=affected_atom
        )
        if definition is not None:
            self._record_match(definition, residues)
            return definition

        if kind == ModificationType.DYNAMIC:
            for refinement_mass, refinement_residue, refinement_tag in STANDARD_REFINEMENT_MODIFICATIONS:
                if refinement_residue in residues and masses_match(refinement_mass, mass, mass_digits):
                    return self._auto_define(
                        mass, kind, refinement_residue, refinement_tag, affected_atom, mass_digits
                    )

        if tag and not is_valid_mass_correction_tag(tag):
            logger.warning(f"Ignoring invalid mass correction tag '{tag}'")
            tag = None
        return self._auto_define(mass, kind, residues, tag, affected_atom, mass_digits)

    def _record_match(self, definition: ModificationDefinition, residues: str):
        definition.occurrence_count += 1
        if definition.kind in (ModificationType.DYNAMIC, ModificationType.STATIC) and definition.target_residues:
            for residue in residues:
                definition.add_target_residue(residue)

    def _auto_define(self, mass, kind, residues, tag, affected_atom, mass_digits) -> ModificationDefinition:
        if any(marker in residues for marker in (N_TERMINAL_PEPTIDE, N_TERMINAL_PROTEIN)):
            residues = N_TERMINAL_PEPTIDE
        elif any(marker in residues for marker in (C_TERMINAL_PEPTIDE, C_TERMINAL_PROTEIN)):
            residues = C_TERMINAL_PEPTIDE

        if not tag:
            # Name a known mass after its tag unless another entry already holds that tag
            tag = self.lookup_mass_correction_tag_by_mass(mass, mass_digits)
            if tag and self.lookup_by_tag(tag) is not None:
                tag = None

        definition = ModificationDefinition(
            symbol="",
            mass=mass,
            target_residues=residues,
            kind=kind,
            mass_correction_tag=tag or self.next_unknown_tag(),
            affected_atom=affected_atom,
            mass_text=f"{mass:.{mass_digits}f}",
            occurrence_count=1,
            auto_defined=True,
        )
        self.assign_symbol(definition)
        self.modifications.append(definition)

        self.diagnostics.info(
            DiagnosticKind.AUTO_DEFINED_MODIFICATION,
            f"Auto-defined modification {definition.mass_correction_tag} "
            f"({definition.mass_text} Da on '{definition.target_residues}') as '{definition.symbol}'",
            payload={
                "tag": definition.mass_correction_tag,
                "mass": definition.mass,
                "symbol": definition.symbol,
            },
        )
        return definition

    # File input and output

    def load_mass_correction_tags(self, path: str):
        """
        Read a two-column, tab-delimited file of tag names and masses.

        Blank lines, comments and rows whose mass is not numeric (such as a
        header) are skipped.
        """
        if not os.path.exists(path):
            raise CatalogLoadError(path, "file not found")

        with open(path) as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line.strip() or line.startswith("#"):
                    continue
                fields = line.split("\t")
                if len(fields) < 2:
                    continue
                tag = fields[0].strip()
                try:
                    mass = float(fields[1])
                except ValueError:
                    continue
                if not is_valid_mass_correction_tag(tag):
                    raise CatalogLoadError(
                        path, f"invalid mass correction tag '{tag}'", line_number, line
                    )
                self.mass_correction_tags[tag] = mass
        logger.info(f"Loaded {len(self.mass_correction_tags)} mass correction tags from {path}")

    def load_modification_definitions(self, path: str):
        """
        Read a tab-delimited modification definitions file.

        Columns are symbol, mass, target residues, type letter (D, S, T, I
        or P), mass correction tag and affected atom; only the first two are
        required. A header line is recognised and skipped, as are lines
        starting with ``#`` whose first field is longer than one character.
        """
        if not os.path.exists(path):
            raise CatalogLoadError(path, "file not found")

        with open(path) as f:
            data_lines = 0
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                fields = [field.strip() for field in line.split("\t")]
                # '#' is also a modification symbol; only longer first fields are comments
                if line.startswith("#") and len(fields[0]) != 1:
                    continue
                data_lines += 1
                try:
                    definition = self._parse_definition_row(fields)
                except ValueError as err:
                    if data_lines == 1:
                        # Header row
                        continue
                    raise CatalogLoadError(path, str(err), line_number, line)
                self.add(definition)
        logger.info(f"Loaded {len(self.modifications)} modification definitions from {path}")

    def _parse_definition_row(self, fields: list) -> ModificationDefinition:
        if len(fields) < 2:
            raise ValueError("expected at least a symbol and a mass")

        symbol = fields[0]
        if len(symbol) != 1:
            raise ValueError(f"modification symbol must be one character, not '{symbol}'")
        mass_text = fields[1]
        mass = float(mass_text)

        residues = fields[2].upper() if len(fields) > 2 else ""
        invalid = set(residues) - _VALID_RESIDUE_CHARACTERS
        if invalid:
            raise ValueError(f"invalid target residues: {''.join(sorted(invalid))}")

        kind = ModificationType.DYNAMIC
        if len(fields) > 3 and fields[3]:
            kind = ModificationType.from_letter(fields[3])
            if kind == ModificationType.UNKNOWN:
                kind = ModificationType.DYNAMIC

        if kind == ModificationType.STATIC and len(residues) == 1:
            if residues in (N_TERMINAL_PEPTIDE, C_TERMINAL_PEPTIDE):
                kind = ModificationType.TERMINAL_PEPTIDE_STATIC
            elif residues in (N_TERMINAL_PROTEIN, C_TERMINAL_PROTEIN):
                kind = ModificationType.PROTEIN_TERMINUS_STATIC

        if kind == ModificationType.TERMINAL_PEPTIDE_STATIC and not (
            N_TERMINAL_PEPTIDE in residues or C_TERMINAL_PEPTIDE in residues
        ):
            raise ValueError("peptide terminus static modification needs '<' or '>' as residue")
        if kind == ModificationType.PROTEIN_TERMINUS_STATIC and not (
            N_TERMINAL_PROTEIN in residues or C_TERMINAL_PROTEIN in residues
        ):
            raise ValueError("protein terminus static modification needs '[' or ']' as residue")

        tag = fields[4] if len(fields) > 4 and fields[4] else None
        if tag is not None and not is_valid_mass_correction_tag(tag):
            raise ValueError(f"invalid mass correction tag '{tag}'")
        if tag is None:
            tag = self.lookup_mass_correction_tag_by_mass(mass) or self.next_unknown_tag()

        affected_atom = fields[5] if len(fields) > 5 and fields[5] else NO_AFFECTED_ATOM
        if kind == ModificationType.ISOTOPIC and affected_atom == NO_AFFECTED_ATOM:
            raise ValueError("isotopic modification needs an affected atom")

        if kind in (
            ModificationType.ISOTOPIC,
            ModificationType.STATIC,
            ModificationType.TERMINAL_PEPTIDE_STATIC,
            ModificationType.PROTEIN_TERMINUS_STATIC,
        ):
            symbol = NO_SYMBOL

        return ModificationDefinition(
            symbol=symbol,
            mass=mass,
            target_residues=residues,
            kind=kind,
            mass_correction_tag=tag,
            affected_atom=affected_atom,
            mass_text=mass_text,
        )

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([d.to_dict() for d in self.modifications], columns=MOD_SUMMARY_COLUMNS)

    def write_mod_summary(self, path: str):
        self.to_dataframe().to_csv(path, sep="\t", index=False)
        logger.info(f"Wrote {len(self.modifications)} modifications to {path}")
