"""Helpers shared by the search engine converters."""

import csv
import logging
import re
from typing import Iterator, Optional

import numpy as np
import pandas as pd
from pyteomics import tandem

from ...utils.mass import PeptideMassCalculator

logger = logging.getLogger(__name__)

mass_calculator = PeptideMassCalculator()

_PRE_POST = re.compile(r"\(pre=.*?,post=.*?\)$")


def to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not np.isfinite(number):
        return None
    return number


def to_int(value) -> Optional[int]:
    number = to_float(value)
    return None if number is None else int(number)


def map_columns(row: dict, mapping: dict, score_columns: list) -> dict:
    """
    Rename native columns to unified field names.

    The first non-empty native column mapped to a field wins. Score columns
    present in the row are copied into ``record["scores"]``.
    """
    record = {}
    for column, field in mapping.items():
        value = row.get(column)
        if value is None or str(value).strip() == "":
            continue
        record.setdefault(field, str(value).strip())

    record["scores"] = {
        column: str(row[column]).strip() for column in score_columns if column in row
    }
    return record


def split_proteins(text: str, delimiter: str = ";") -> list:
    return [p.strip() for p in str(text).split(delimiter) if p.strip()]


def strip_pre_post(protein: str) -> str:
    """Remove the ``(pre=K,post=R)`` suffix MS-GF+ adds to protein names."""
    return _PRE_POST.sub("", protein)


def mh_to_neutral(mh) -> Optional[float]:
    mh = to_float(mh)
    return None if mh is None else mass_calculator.convolute_mass(mh, 1, 0)


def read_header(path: str) -> list:
    """Column names on the first non-blank line of a tab-delimited file ([] when unreadable)."""
    try:
        with open(path, errors="replace") as f:
            for line in f:
                if line.strip():
                    return [c.strip() for c in line.rstrip("\r\n").split("\t")]
    except OSError as err:
        logger.warning(f"Could not read header of {path}: {err}")
    return []


def iterate_tabular_rows(path: str, chunk_size: int = 10000) -> Iterator[tuple]:
    """
    Yield ``(line_number, row, raw_text)`` for every data line of a tab-delimited file.

    The file is read in chunks and closed when the generator finishes or is closed.
    """
    with pd.read_csv(
        path,
        sep="\t",
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        quoting=csv.QUOTE_NONE,
        skip_blank_lines=True,
        chunksize=chunk_size,
    ) as reader:
        for chunk in reader:
            columns = list(chunk.columns)
            for index, values in zip(chunk.index, chunk.itertuples(index=False, name=None)):
                row = dict(zip(columns, values))
                yield int(index) + 2, row, "\t".join(values)


def iterate_tandem_rows(path: str, chunk_size: int = None) -> Iterator[tuple]:
    """
    Yield one flattened row per (spectrum group, protein) hit of an X!Tandem XML file.
    """
    with tandem.read(path) as reader:
        for group in reader:
            for row in flatten_tandem_group(group):
                yield None, row, f"group {group.get('id')}"


def _first(value):
    if isinstance(value, list):
        return value[0] if value else {}
    return value if value is not None else {}


def flatten_tandem_group(group: dict) -> list:
    """Turn a pyteomics X!Tandem group into rows keyed like the X!Tandem synopsis columns."""
    proteins = group.get("protein") or []
    if isinstance(proteins, dict):
        proteins = [proteins]

    rows = []
    for protein in proteins:
        peptide = _first(protein.get("peptide"))
        domain = _first(peptide.get("domain")) if "domain" in peptide else peptide
        sequence = domain.get("seq", "")
        if not sequence:
            continue

        row = {
            "Result_ID": str(group.get("id", "")),
            "Group_ID": str(group.get("id", "")),
            "Scan": str(group.get("id", "")),
            "Charge": str(group.get("z", "")),
            "Peptide_MH": str(domain.get("mh", "")),
            "Delta_Mass": str(domain.get("delta", "")),
            "Peptide_Hyperscore": str(domain.get("hyperscore", "")),
            "Peptide_Expectation_Value_Log(e)": str(domain.get("expect", "")),
            "y_score": str(domain.get("y_score", "")),
            "y_ions": str(domain.get("y_ions", "")),
            "b_score": str(domain.get("b_score", "")),
            "b_ions": str(domain.get("b_ions", "")),
            "Protein_Name": str(protein.get("label", "")).split(" ")[0],
            "Peptide_Sequence": annotate_tandem_sequence(
                sequence, domain.get("pre", ""), domain.get("post", ""),
                domain.get("start"), domain.get("aa")
            ),
        }
        rows.append(row)
    return rows


def annotate_tandem_sequence(sequence: str, pre: str, post: str, start, modifications) -> str:
    """
    Write an X!Tandem domain as ``X.SEQ.Y`` with bracketed mass deltas.

    X!Tandem reports modification positions relative to the protein, so
    ``start`` is needed to place them on the peptide.
    """
    if isinstance(modifications, dict):
        modifications = [modifications]
    start = to_int(start) or 1

    masses = {}
    for modification in modifications or []:
        position = to_int(modification.get("at"))
        mass = to_float(modification.get("modified"))
        if position is None or mass is None:
            continue
        masses.setdefault(position - start + 1, []).append(mass)

    annotated = ""
    for position, residue in enumerate(sequence, start=1):
        annotated += residue + "".join(f"[{mass:+.4f}]" for mass in masses.get(position, []))

    prefix = (pre or "-")[-1:].replace("[", "-")
    suffix = (post or "-")[:1].replace("]", "-")
    return f"{prefix}.{annotated}.{suffix}"
