"""Tests for the normalize_results command line script."""

import argparse
import os

import pandas as pd

from phrp_utils.parsers.scripts.normalize_results import default_output_path, main, mod_summary_path


def make_args(input_path, **kwargs):
    args = dict(
        input=input_path, mod_defs=None, mass_tags=None, params=None, result_type=None,
        enzyme=None, output=None, log_file=None, dedup=False,
    )
    args.update(kwargs)
    return argparse.Namespace(**args)


def test_output_paths():
    assert default_output_path("/data/Dataset_syn.txt") == "/data/Dataset_syn_PSMs.tsv"
    assert mod_summary_path("/data/out.tsv") == "/data/out_ModSummary.txt"


def test_main(msgfplus_synopsis, tmp_path):
    output = str(tmp_path / "normalized.tsv")
    main(make_args(msgfplus_synopsis, output=output, dedup=True))

    psms = pd.read_csv(output, sep="\t", dtype=str, keep_default_na=False)
    assert list(psms["Scan"]) == ["100", "101", "103"]
    assert list(psms["CleanSequence"]) == ["PEPTIDE", "PEPTMIDEK", "MPEPK"]
    assert "MSGFScore" in psms.columns

    summary = pd.read_csv(mod_summary_path(output), sep="\t", dtype=str, keep_default_na=False)
    assert list(summary["Mass_Correction_Tag"]) == ["Plus1Oxy"]
    assert list(summary["Occurrence_Count"]) == ["2"]


def test_main_default_output(msgfplus_synopsis):
    main(make_args(msgfplus_synopsis))
    assert os.path.exists(default_output_path(msgfplus_synopsis))
