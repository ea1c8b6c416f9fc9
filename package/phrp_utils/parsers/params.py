"""Read search tool parameter files for enzyme, tolerance and modification settings."""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Optional

from pyteomics import mass as pyteomics_mass
from pyteomics.auxiliary import PyteomicsError

from ..data.modification import (
    C_TERMINAL_PEPTIDE,
    C_TERMINAL_PROTEIN,
    N_TERMINAL_PEPTIDE,
    N_TERMINAL_PROTEIN,
    ModificationDefinition,
    ModificationType,
    is_valid_mass_correction_tag,
)

logger = logging.getLogger(__name__)

ENZYME_KEYS = ("enzymeid", "enzyme", "enzyme_info", "protease", "enzyme_name")
MISSED_CLEAVAGE_KEYS = (
    "maxnumberinternalcleavages",
    "maxmissedcleavages",
    "max_num_internal_cleavage_sites",
    "miscleavage",
)
MIN_TERMINI_KEYS = ("ntt", "numtolerabletermini", "numtolerableterminus", "minnumbertermini")
TOLERANCE_KEYS = (
    "precursormasstolerance",
    "pmtolerance",
    "peptide_mass_tolerance",
    "ppmtolerance",
    "pptolerance",
)

# MS-GF+ style position column -> residue marker
POSITION_MARKERS = {
    "nterm": N_TERMINAL_PEPTIDE,
    "cterm": C_TERMINAL_PEPTIDE,
    "protnterm": N_TERMINAL_PROTEIN,
    "protcterm": C_TERMINAL_PROTEIN,
}

_TOLERANCE = re.compile(r"^\s*([+-]?\d+(?:\.\d*)?)\s*(ppm|da|mmu)?", re.IGNORECASE)


@dataclass
class SearchEngineParameters:
    search_engine: str = ""
    param_file_path: str = ""
    enzyme: str = "trypsin"
    max_number_internal_cleavages: Optional[int] = None
    min_number_termini: int = 0
    precursor_mass_tolerance_da: float = 0.0
    precursor_mass_tolerance_ppm: float = 0.0
    modifications: list = field(default_factory=list)
    parameters: dict = field(default_factory=dict)

    def apply_to_catalog(self, catalog) -> list:
        """
        Add the parameter file's modifications to a catalog, returning the catalog's entries.

        A known mass correction tag with the same mass (to 5 decimals, since
        formula masses and tag masses are rounded differently) replaces the
        name from the file. Unnamed, unknown masses get the catalog's next
        unknown tag.
        """
        entries = []
        for definition in self.modifications:
            definition.mass_correction_tag = (
                catalog.lookup_mass_correction_tag_by_mass(definition.mass, 5)
                or definition.mass_correction_tag
                or catalog.next_unknown_tag()
            )
            entries.append(catalog.add(definition, use_next_symbol=True))
        return entries


def parse_mass_or_formula(text: str) -> float:
    """
    Interpret ``57.021464`` as a mass and ``C2H3NO`` or ``H-1`` as an elemental composition.

    Raises
    ------
    ValueError
        If the text is neither.
    """
    text = text.strip()
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return pyteomics_mass.calculate_mass(formula=text.replace(" ", ""))
    except PyteomicsError as err:
        raise ValueError(f"Cannot interpret '{text}' as a mass or empirical formula") from err


def parse_tolerance(text: str) -> tuple:
    """Return ``(tolerance_da, tolerance_ppm)``; the value without a unit is taken as Da."""
    match = _TOLERANCE.match(text.split(",")[0])
    if not match:
        return 0.0, 0.0
    value = abs(float(match.group(1)))
    unit = (match.group(2) or "da").lower()
    if unit == "ppm":
        return 0.0, value
    if unit == "mmu":
        return value / 1000, 0.0
    return value, 0.0


def parse_enzyme(text: str) -> str:
    """``Trypsin(KR/P) 1 1 KR P`` -> ``Trypsin``; MS-GF+ numeric IDs are returned unchanged."""
    token = text.strip().split()[0] if text.strip() else "trypsin"
    return token.split("(")[0]


def parse_modification_spec(parts: list, static: Optional[bool] = None) -> ModificationDefinition:
    """
    Build a definition from an MS-GF+ style modification spec.

    Parameters
    ----------
    parts: list
        ``[mass_or_formula, residues, fix|opt, position, name]``; the last
        three fields are optional.
    static: bool
        Force the kind, for ``StaticMod=``/``DynamicMod=`` lines.

    Return
    ------
    ModificationDefinition
        Terminus positions replace the residues with the matching marker.
        A terminal fixed mod restricted to specific residues is read as dynamic.
    """
    parts = [p.strip() for p in parts]
    if len(parts) < 2:
        raise ValueError(f"Modification spec needs at least a mass and residues: {','.join(parts)}")

    mass = parse_mass_or_formula(parts[0])
    residues = parts[1]
    fixed = static if static is not None else (len(parts) > 2 and parts[2].lower() == "fix")
    position = parts[3].lower().replace("-", "") if len(parts) > 3 else "any"
    name = parts[4] if len(parts) > 4 else ""

    kind = ModificationType.STATIC if fixed else ModificationType.DYNAMIC
    if position in POSITION_MARKERS:
        if fixed and residues != "*":
            kind = ModificationType.DYNAMIC
        marker = POSITION_MARKERS[position]
        residues = marker
        if kind == ModificationType.STATIC:
            kind = (
                ModificationType.PROTEIN_TERMINUS_STATIC
                if marker in (N_TERMINAL_PROTEIN, C_TERMINAL_PROTEIN)
                else ModificationType.TERMINAL_PEPTIDE_STATIC
            )
    elif position != "any":
        logger.warning(f"Unrecognized modification position '{parts[3]}'; treating it as 'any'")

    residues = residues.replace("*", "")
    tag = name if is_valid_mass_correction_tag(name) else ""
    return ModificationDefinition(
        symbol="",
        mass=mass,
        target_residues=residues,
        kind=kind,
        mass_correction_tag=tag,
        mass_text=parts[0],
    )


def _inspect_modification(parts: list) -> list:
    # Inspect: mod,<mass>,<residues>[,fix|opt|nterminal|cterminal[,name]]
    spec = [parts[0], parts[1] if len(parts) > 1 else ""]
    kind = parts[2].lower() if len(parts) > 2 else "opt"
    if kind in ("nterminal", "cterminal"):
        spec += ["opt", kind[0] + "term"]
    else:
        spec += [kind, "any"]
    spec.append(parts[3] if len(parts) > 3 else "")
    return spec


def read_search_engine_parameters(path: str, search_engine: str = "") -> SearchEngineParameters:
    """
    Read a ``key=value`` (or Inspect ``key,value``) search tool parameter file.

    Recognized settings are the enzyme, the maximum number of internal
    cleavages, the number of tolerable termini and the precursor mass
    tolerance. ``StaticMod=``, ``DynamicMod=``, Inspect ``mod,`` and MODa
    ``ADD=`` lines become modification definitions. Every setting is also
    kept verbatim in ``parameters``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Search engine parameter file not found: {path}")

    params = SearchEngineParameters(search_engine=search_engine, param_file_path=path)
    with open(path, errors="replace") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.split("#")[0].strip()
            if not line or line.startswith(("[", ";")):
                continue

            separator = "=" if "=" in line else ","
            key, _, value = line.partition(separator)
            key, value = key.strip(), value.strip()
            if not key:
                continue
            lowered = key.lower()

            try:
                if lowered in ("staticmod", "dynamicmod"):
                    if value.lower() != "none":
                        params.modifications.append(
                            parse_modification_spec(value.split(","), static=lowered == "staticmod")
                        )
                    continue
                if lowered == "mod" and separator == ",":
                    params.modifications.append(parse_modification_spec(_inspect_modification(value.split(","))))
                    continue
                if lowered == "add":
                    # MODa: ADD=C, 57.021464
                    residue, _, mass = value.partition(",")
                    params.modifications.append(parse_modification_spec([mass, residue.strip()], static=True))
                    continue
            except ValueError as err:
                logger.warning(f"{path}:{line_number}: skipping modification '{line}': {err}")
                continue

            params.parameters[key] = value
            if lowered in ENZYME_KEYS:
                params.enzyme = parse_enzyme(value)
            elif lowered in MISSED_CLEAVAGE_KEYS:
                try:
                    params.max_number_internal_cleavages = int(float(value))
                except ValueError:
                    logger.warning(f"{path}:{line_number}: non-numeric {key} '{value}'")
            elif lowered in MIN_TERMINI_KEYS:
                try:
                    params.min_number_termini = int(float(value))
                except ValueError:
                    logger.warning(f"{path}:{line_number}: non-numeric {key} '{value}'")
            elif lowered in TOLERANCE_KEYS:
                tolerance_da, tolerance_ppm = parse_tolerance(value)
                params.precursor_mass_tolerance_da = tolerance_da or params.precursor_mass_tolerance_da
                params.precursor_mass_tolerance_ppm = tolerance_ppm or params.precursor_mass_tolerance_ppm

    logger.info(
        f"Read {len(params.parameters)} settings and {len(params.modifications)} "
        f"modifications from {os.path.basename(path)}"
    )
    return params
