"""Pytest configuration for phrp_utils tests.

Result files are small tab-delimited tables written into ``tmp_path`` so
every test reads real files through the same code path as the CLI.
"""

import pytest

from phrp_utils.data import DiagnosticsChannel, ModificationCatalog
from phrp_utils.utils import CleavageStateCalculator, PeptideMassCalculator

PEPTIDE_MASS = 799.3599268654446

MSGFPLUS_SYN_COLUMNS = [
    "ResultID", "Scan", "FragMethod", "SpecIndex", "Charge", "PrecursorMZ", "DelM",
    "DelM_PPM", "MH", "Peptide", "Protein", "NTT", "DeNovoScore", "MSGFScore",
    "MSGFDB_SpecEValue", "Rank_MSGFDB_SpecEValue", "EValue", "QValue",
]


@pytest.fixture
def peptide_mass():
    """Monoisotopic mass of PEPTIDE (residues plus water)."""
    return PEPTIDE_MASS


@pytest.fixture
def mass_calculator():
    return PeptideMassCalculator()


@pytest.fixture
def cleavage_calculator():
    """Trypsin cleavage state calculator."""
    return CleavageStateCalculator("trypsin")


@pytest.fixture
def diagnostics():
    return DiagnosticsChannel(log=False)


@pytest.fixture
def catalog(diagnostics):
    """Empty catalog with the default symbol pool and mass correction tags."""
    return ModificationCatalog(diagnostics=diagnostics)


@pytest.fixture
def write_table(tmp_path):
    """Write a tab-delimited table and return its path."""

    def _write(name, columns, rows):
        path = tmp_path / name
        lines = ["\t".join(columns)]
        for row in rows:
            lines.append("\t".join(str(row.get(column, "")) for column in columns))
        path.write_text("\n".join(lines) + "\n")
        return str(path)

    return _write


@pytest.fixture
def write_text(tmp_path):
    """Write a plain text file and return its path."""

    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return _write


def msgfplus_row(result_id, scan, peptide, charge=2, **kwargs):
    row = {
        "ResultID": result_id,
        "Scan": scan,
        "FragMethod": "HCD",
        "SpecIndex": result_id,
        "Charge": charge,
        "Peptide": peptide,
        "Protein": "Prot1",
        "NTT": 2,
        "DeNovoScore": 120,
        "MSGFScore": 98,
        "MSGFDB_SpecEValue": "1.5E-12",
        "Rank_MSGFDB_SpecEValue": 1,
        "EValue": "3.2E-06",
        "QValue": 0,
    }
    row.update(kwargs)
    return row


@pytest.fixture
def msgfplus_synopsis(write_table):
    """
    MS-GF+ synopsis file with a duplicate, an unknown mass and an invalid residue.

    Rows: PEPTIDE (scan 100), the same PSM again from a second protein,
    PEPTM+15.995IDEK (scan 101), PEPTXIDE (scan 102, invalid residue) and
    M+15.995PEPK at a protein C-terminus (scan 103).
    """
    rows = [
        msgfplus_row(1, 100, "K.PEPTIDE.R", DelM="0.0"),
        msgfplus_row(2, 100, "K.PEPTIDE.R", DelM="0.0", Protein="Prot2"),
        msgfplus_row(3, 101, "K.PEPTM+15.995IDEK.A"),
        msgfplus_row(4, 102, "K.PEPTXIDE.R"),
        msgfplus_row(5, 103, "K.M+15.995PEPK.-", charge=3),
    ]
    return write_table("Dataset_msgfplus_syn.txt", MSGFPLUS_SYN_COLUMNS, rows)


@pytest.fixture
def make_msgfplus_row():
    return msgfplus_row


@pytest.fixture
def msgfplus_columns():
    return list(MSGFPLUS_SYN_COLUMNS)
