"""
Unified PSM stream over any supported search engine result file.

Examples
--------
>>> with ReaderFactory("Dataset_msgfplus_syn.txt", deduplicate=True) as reader:
...     for psm in reader:
...         print(psm.scan_number, psm.peptide, psm.mass_error_ppm)
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd
from lxml import etree
from psm_utils import PSMList
from tqdm import tqdm

from ..data.catalog import ModificationCatalog
from ..data.diagnostics import DiagnosticKind, DiagnosticsChannel
from ..data.modification import (
    C_TERMINAL_PEPTIDE,
    C_TERMINAL_PROTEIN,
    N_TERMINAL_PEPTIDE,
    N_TERMINAL_PROTEIN,
    STATIC_TYPES,
    ModificationType,
)
from ..data.psm import PSM
from ..exceptions import (
    CatalogLoadError,
    EnzymeNotSupported,
    FormatUndetermined,
    InvalidResidue,
    ResultTypeNotSupported,
    UnknownModificationName,
    UnknownModificationSymbol,
)
from ..utils.cleavage import CleavageStateCalculator, TerminusState, split_prefix_and_suffix
from ..utils.mass import MASS_DIGITS_OF_PRECISION, PeptideMassCalculator
from .constants import DEFAULT_TSV_FALLBACK
from .converters.base import ResultType
from .converters.utils import to_float, to_int
from .detection import ResultTypeDetector
from .params import read_search_engine_parameters
from .sequence import ModificationAnnotation, parse_modified_sequence

logger = logging.getLogger(__name__)

DEFAULT_ENZYME = "trypsin"


class ReaderState(Enum):
    CREATED = "created"
    OPENED = "opened"
    READING = "reading"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass
class ReaderOptions:
    """
    Settings for a ReaderFactory.

    ``enzyme`` overrides the enzyme from the search tool parameter file;
    without either, trypsin is used. ``result_type`` skips detection.
    """

    deduplicate: bool = False
    enzyme: Optional[str] = None
    mass_disagreement_threshold: float = 0.1
    mod_definitions_path: Optional[str] = None
    mass_correction_tags_path: Optional[str] = None
    search_engine_param_path: Optional[str] = None
    result_type: Optional[str] = None
    tsv_fallback: Optional[str] = DEFAULT_TSV_FALLBACK
    chunk_size: int = 10000


class ReaderFactory:
    """
    Pull-based reader that turns one result file into normalized PSMs.

    The reader moves through ``CREATED -> OPENED -> READING`` and ends in
    ``EXHAUSTED`` or ``ERROR``. Opening fails (and the reader stays in
    ``ERROR``) when the result type cannot be determined or a catalog file
    is malformed. Problems with single records are reported on the
    diagnostics channel and the record is skipped.

    Parameters
    ----------
    path: str
        Result file to read.
    options: ReaderOptions
        Reader settings; keyword arguments override individual fields.
    catalog: ModificationCatalog
        Catalog to resolve modifications against. A new one is built from
        the options' definition files when omitted.
    diagnostics: DiagnosticsChannel
        Channel receiving warnings, errors and auto-definition notices.
    """

    def __init__(
        self,
        path: str,
        options: Optional[ReaderOptions] = None,
        catalog: Optional[ModificationCatalog] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
        **kwargs,
    ):
        options = options if options is not None else ReaderOptions()
        self.options = dataclasses.replace(options, **kwargs) if kwargs else options
        self.path = path

        if diagnostics is None:
            diagnostics = catalog.diagnostics if catalog is not None else DiagnosticsChannel()
        self.diagnostics = diagnostics
        self.catalog = catalog

        self.state = ReaderState.CREATED
        self.result_type = ResultType.UNKNOWN
        self.search_engine_parameters = None
        self.mass_calculator = PeptideMassCalculator()
        self.cleavage_calculator = None

        self.psm_count = 0
        self.skipped_count = 0
        self.duplicate_count = 0
        self._rows = None
        self._current = None
        self._seen_keys = set()

    def __repr__(self):
        return f"ReaderFactory({self.path!r}, {self.result_type.label}, {self.state.name})"

    # State

    @property
    def current_psm(self) -> Optional[PSM]:
        return self._current

    @property
    def can_read(self) -> bool:
        return self.state in (ReaderState.CREATED, ReaderState.OPENED, ReaderState.READING)

    @property
    def errors(self) -> list:
        return self.diagnostics.errors

    def _fail(self, kind: DiagnosticKind, error: Exception):
        self.state = ReaderState.ERROR
        self._close_rows()
        self.diagnostics.error(kind, str(error), path=self.path)
        raise error

    def _close_rows(self):
        if self._rows is not None:
            self._rows.close()
            self._rows = None

    # Opening

    def _detect_result_type(self) -> ResultType:
        if self.options.result_type:
            return ResultType.select(self.options.result_type)
        return ResultTypeDetector(self.options.tsv_fallback).detect(self.path)

    def _build_catalog(self):
        if self.catalog is None:
            self.catalog = ModificationCatalog.from_files(
                self.options.mod_definitions_path,
                self.options.mass_correction_tags_path,
                diagnostics=self.diagnostics,
            )
            return
        if self.options.mass_correction_tags_path:
            self.catalog.load_mass_correction_tags(self.options.mass_correction_tags_path)
        if self.options.mod_definitions_path:
            self.catalog.load_modification_definitions(self.options.mod_definitions_path)

    def _configure_enzyme(self):
        enzyme = self.options.enzyme
        if enzyme is None and self.search_engine_parameters is not None:
            enzyme = self.search_engine_parameters.enzyme
        try:
            self.cleavage_calculator = CleavageStateCalculator(enzyme or DEFAULT_ENZYME)
        except EnzymeNotSupported as err:
            logger.warning(f"{err}; using {DEFAULT_ENZYME}")
            self.cleavage_calculator = CleavageStateCalculator(DEFAULT_ENZYME)

    def open(self) -> "ReaderFactory":
        """
        Detect the result type, build the catalog and prepare the row reader.

        Raises
        ------
        FileNotFoundError
            If the result file or the parameter file does not exist.
        FormatUndetermined
            If the result type cannot be determined.
        CatalogLoadError
            If a modification definitions or mass correction tags file is malformed.
        """
        if self.state != ReaderState.CREATED:
            return self

        if not os.path.exists(self.path):
            self._fail(DiagnosticKind.READ_ERROR, FileNotFoundError(f"Result file not found: {self.path}"))

        try:
            self.result_type = self._detect_result_type()
        except ResultTypeNotSupported as err:
            self._fail(DiagnosticKind.FORMAT_UNDETERMINED, err)
        if self.result_type is ResultType.UNKNOWN:
            self._fail(DiagnosticKind.FORMAT_UNDETERMINED, FormatUndetermined(self.path))

        try:
            self._build_catalog()
        except CatalogLoadError as err:
            self._fail(DiagnosticKind.CATALOG_LOAD_ERROR, err)

        if self.options.search_engine_param_path:
            try:
                self.search_engine_parameters = read_search_engine_parameters(
                    self.options.search_engine_param_path, self.result_type.engine
                )
            except FileNotFoundError as err:
                self._fail(DiagnosticKind.READ_ERROR, err)
            self.search_engine_parameters.apply_to_catalog(self.catalog)
        self._configure_enzyme()

        self._rows = self.result_type.rows(self.path, self.options.chunk_size)
        self.state = ReaderState.OPENED
        logger.info(f"Reading {os.path.basename(self.path)} as {self.result_type.label} results")
        return self

    # Reading

    def move_next(self) -> bool:
        """
        Advance to the next PSM.

        Return
        ------
        bool
            True when ``current_psm`` holds a new PSM, False once the file is
            exhausted or reading failed.
        """
        if self.state == ReaderState.CREATED:
            self.open()
        if self.state not in (ReaderState.OPENED, ReaderState.READING):
            return False
        self.state = ReaderState.READING

        while True:
            try:
                line_number, row, raw_text = next(self._rows)
            except StopIteration:
                self._finish()
                return False
            except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, etree.XMLSyntaxError) as err:
                self.state = ReaderState.ERROR
                self._close_rows()
                self._current = None
                self.diagnostics.error(DiagnosticKind.READ_ERROR, str(err), path=self.path)
                return False

            psm = self._parse_record(line_number, row, raw_text)
            if psm is None:
                continue

            if self.options.deduplicate:
                if psm.key in self._seen_keys:
                    self.duplicate_count += 1
                    continue
                self._seen_keys.add(psm.key)

            self._current = psm
            self.psm_count += 1
            return True

    def _finish(self):
        self.state = ReaderState.EXHAUSTED
        self._current = None
        self._close_rows()
        logger.info(
            f"Read {self.psm_count} PSMs from {os.path.basename(self.path)} "
            f"({self.skipped_count} skipped, {self.duplicate_count} duplicates)"
        )

    def _parse_record(self, line_number, row, raw_text) -> Optional[PSM]:
        context = {"path": self.path, "line_number": line_number, "raw_text": raw_text}
        try:
            return self.build_psm(row, line_number, raw_text)
        except InvalidResidue as err:
            self.diagnostics.warning(DiagnosticKind.INVALID_RESIDUE, f"Skipping record: {err}", **context)
        except (UnknownModificationName, UnknownModificationSymbol) as err:
            self.diagnostics.warning(DiagnosticKind.UNKNOWN_MODIFICATION, f"Skipping record: {err}", **context)
        except (ValueError, OverflowError) as err:
            self.diagnostics.warning(DiagnosticKind.MALFORMED_RECORD, f"Skipping record: {err}", **context)
        self.skipped_count += 1
        return None

    def __iter__(self):
        while self.move_next():
            yield self._current

    def close(self):
        """Release the result file; a reader that was still reading is marked exhausted."""
        self._close_rows()
        if self.state in (ReaderState.OPENED, ReaderState.READING):
            self.state = ReaderState.EXHAUSTED
        self._current = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def to_psm_list(self, score_name: Optional[str] = None) -> PSMList:
        """Read the remaining PSMs into a psm_utils PSMList."""
        psm_list = []
        for psm in tqdm(self, desc=f"Reading {os.path.basename(self.path)}", unit=" PSMs"):
            psm_utils_psm = psm.to_psm_utils(score_name=score_name)
            if psm_utils_psm is not None:
                psm_list.append(psm_utils_psm)
        return PSMList(psm_list=psm_list)

    # PSM assembly

    def build_psm(self, row: dict, line_number: Optional[int] = None, raw_text: Optional[str] = None) -> PSM:
        """
        Turn one native row into a PSM.

        Raises
        ------
        InvalidResidue
            If the peptide holds a non-standard residue.
        UnknownModificationName, UnknownModificationSymbol
            If a modification cannot be resolved.
        ValueError
            If the row lacks a scan number or peptide.
        """
        if self.cleavage_calculator is None:
            self._configure_enzyme()
        if self.catalog is None:
            self.catalog = ModificationCatalog(diagnostics=self.diagnostics)
        record = self.result_type.parse(row)

        scan_text = record.get("scan", "").split()
        scan_number = to_int(scan_text[0]) if scan_text else None
        if scan_number is None:
            raise ValueError(f"No scan number in record {record.get('scan')!r}")
        peptide = record.get("peptide", "")
        if not peptide:
            raise ValueError("No peptide in record")

        psm = PSM(
            scan_number,
            to_int(record.get("charge")) or 0,
            peptide,
            result_id=to_int(record.get("result_id")) or line_number or 0,
        )
        psm.result_type = self.result_type.engine
        psm.source_path = self.path
        psm.line_number = line_number
        psm.data_line_text = raw_text
        psm.collision_mode = record.get("collision_mode", psm.collision_mode)
        psm.score_rank = to_int(record.get("rank")) or 1
        for name, value in record["scores"].items():
            psm.set_score(name, value)

        prefix, core, suffix = split_prefix_and_suffix(peptide)
        psm.prefix = prefix.replace("_", "-")
        psm.suffix = suffix.replace("_", "-")
        parsed = parse_modified_sequence(core)
        psm.clean_sequence = parsed.clean_sequence
        if not psm.clean_sequence:
            raise ValueError(f"No residues in peptide '{peptide}'")

        annotations = list(parsed.annotations)
        for name, position in record.get("modifications", []):
            annotations.append(ModificationAnnotation(position, name=name))

        calculator = self.cleavage_calculator
        psm.num_tryptic_termini = calculator.count_tryptic_termini(psm.prefix, psm.clean_sequence, psm.suffix)
        psm.cleavage_state = calculator.compute_cleavage_state(psm.prefix, psm.clean_sequence, psm.suffix)
        psm.terminus_state = calculator.compute_terminus_state(psm.prefix, psm.suffix)
        psm.num_missed_cleavages = calculator.compute_missed_cleavages(psm.clean_sequence)

        # Protein terminus static mods depend on terminus_state
        for annotation in annotations:
            self._resolve_annotation(psm, annotation)
        self._apply_static_modifications(psm)

        for protein in record["proteins"]:
            psm.add_protein(
                protein,
                to_int(record.get("residue_start")),
                to_int(record.get("residue_end")),
                record.get("protein_description", ""),
            )

        self._compute_masses(psm, record)
        return psm

    def _resolve_annotation(self, psm: PSM, annotation: ModificationAnnotation):
        sequence = psm.clean_sequence
        if annotation.end_position > len(sequence) or annotation.position < 0:
            raise ValueError(
                f"Modification position {annotation.position} is outside '{sequence}'"
            )

        if annotation.is_n_terminal:
            position = end_position = 1
            residues = N_TERMINAL_PEPTIDE
        else:
            position, end_position = annotation.position, annotation.end_position
            residues = sequence[position - 1:end_position]

        if annotation.symbol:
            definition = self.catalog.lookup_by_symbol(annotation.symbol)
            if definition is None:
                raise UnknownModificationSymbol(annotation.symbol, psm.peptide)
            definition.occurrence_count += 1
        elif annotation.name:
            mass = self.catalog.lookup_mass_by_name(annotation.name)
            if mass is None:
                raise UnknownModificationName(annotation.name)
            definition = self._resolve_mass(
                mass, residues, MASS_DIGITS_OF_PRECISION, self.catalog.lookup_tag_by_name(annotation.name)
            )
        else:
            definition = self._resolve_mass(annotation.mass, residues, annotation.mass_digits)

        psm.add_modified_residue(sequence[position - 1], position, definition, end_position)

    def _resolve_mass(self, mass: float, residues: str, mass_digits: int, tag: Optional[str] = None):
        # Engines often write static modifications out in full; match those first
        static = self.catalog.lookup_by_mass(
            mass, residues=residues, kinds=STATIC_TYPES, mass_digits=mass_digits
        )
        if static is not None and any(static.targets(r) for r in residues):
            static.occurrence_count += 1
            return static
        return self.catalog.resolve_by_tag_or_mass(
            tag, mass, ModificationType.DYNAMIC, residues, mass_digits=mass_digits
        )

    @staticmethod
    def _has_modification(psm: PSM, position: int, definition) -> bool:
        return any(
            m.position == position and m.modification is definition for m in psm.modified_residues
        )

    def _apply_static(self, psm: PSM, position: int, definition):
        if not self._has_modification(psm, position, definition):
            psm.add_modified_residue(psm.clean_sequence[position - 1], position, definition)
            definition.occurrence_count += 1

    def _apply_static_modifications(self, psm: PSM):
        last = len(psm.clean_sequence)
        at_protein_n_terminus = psm.terminus_state in (
            TerminusState.PROTEIN_N_TERMINUS, TerminusState.PROTEIN_N_AND_C_TERMINUS
        )
        at_protein_c_terminus = psm.terminus_state in (
            TerminusState.PROTEIN_C_TERMINUS, TerminusState.PROTEIN_N_AND_C_TERMINUS
        )

        for definition in self.catalog.static_modifications():
            if definition.kind == ModificationType.STATIC:
                for position, residue in enumerate(psm.clean_sequence, start=1):
                    if definition.targets(residue):
                        self._apply_static(psm, position, definition)
            elif definition.kind == ModificationType.TERMINAL_PEPTIDE_STATIC:
                if definition.targets(N_TERMINAL_PEPTIDE):
                    self._apply_static(psm, 1, definition)
                if definition.targets(C_TERMINAL_PEPTIDE):
                    self._apply_static(psm, last, definition)
            elif definition.kind == ModificationType.PROTEIN_TERMINUS_STATIC:
                if definition.targets(N_TERMINAL_PROTEIN) and at_protein_n_terminus:
                    self._apply_static(psm, 1, definition)
                if definition.targets(C_TERMINAL_PROTEIN) and at_protein_c_terminus:
                    self._apply_static(psm, last, definition)

    def _reported_peptide_mass(self, record: dict) -> Optional[float]:
        peptide_mass = to_float(record.get("peptide_mass"))
        if peptide_mass is not None:
            return peptide_mass
        peptide_mh = to_float(record.get("peptide_mh"))
        if peptide_mh is not None:
            return self.mass_calculator.convolute_mass(peptide_mh, 1, 0)
        return None

    def _observed_precursor_mass(self, record: dict, charge: int) -> Optional[float]:
        precursor_mass = to_float(record.get("precursor_mass"))
        if precursor_mass is not None:
            return precursor_mass
        precursor_mz = to_float(record.get("precursor_mz"))
        if precursor_mz is not None and charge > 0:
            return self.mass_calculator.convolute_mass(precursor_mz, charge, 0)
        precursor_mh = to_float(record.get("precursor_mh"))
        if precursor_mh is not None:
            return self.mass_calculator.convolute_mass(precursor_mh, 1, 0)
        return None

    def _compute_masses(self, psm: PSM, record: dict):
        computed = self.mass_calculator.compute_sequence_mass(psm.clean_sequence, psm.modification_offsets)
        psm.peptide_monoisotopic_mass = computed

        reported = self._reported_peptide_mass(record)
        if reported is not None and abs(reported - computed) > self.options.mass_disagreement_threshold:
            self.diagnostics.warning(
                DiagnosticKind.MASS_DISAGREEMENT,
                f"Scan {psm.scan_number}, {psm.peptide}: reported mass {reported:.4f} "
                f"differs from computed mass {computed:.4f} by {reported - computed:.4f} Da",
                path=self.path,
                line_number=psm.line_number,
                raw_text=psm.data_line_text,
                payload={"reported": reported, "computed": computed},
            )

        psm.precursor_neutral_mass = self._observed_precursor_mass(record, psm.charge)

        raw_delta = to_float(record.get("delm_da"))
        if raw_delta is None and psm.precursor_neutral_mass is not None:
            raw_delta = psm.precursor_neutral_mass - computed

        if raw_delta is None:
            psm.mass_error_ppm = to_float(record.get("delm_ppm"))
            return

        psm.mass_error_da = raw_delta
        psm.mass_error_ppm, psm.isotope_shift = self.mass_calculator.precursor_error_ppm(raw_delta, computed)
