from enum import Enum

from .sequest import sequest_parser
from .xtandem import xtandem_parser
from .inspect import inspect_parser
from .msgfplus import msgfplus_parser
from .msalign import msalign_parser
from .moda import moda_parser
from .modplus import modplus_parser
from .mspathfinder import mspathfinder_parser
from .toppic import toppic_parser
from .maxquant import maxquant_parser
from .utils import iterate_tabular_rows, iterate_tandem_rows

from ...exceptions import ResultTypeNotSupported


# Supported search engine result formats, each with a pure row parser and a row reader
class ResultType(Enum):
    """
    Examples
    --------
    >>> result_type = ResultType.select('msgfplus')
    >>> for line_number, row, raw_text in result_type.rows('Dataset_msgfplus.tsv'):
    ...     record = result_type.parse(row)
    """
    UNKNOWN = ("unknown", None, None)
    SEQUEST = ("sequest", sequest_parser, iterate_tabular_rows)
    XTANDEM = ("xtandem", xtandem_parser, iterate_tabular_rows)
    XTANDEM_XML = ("xtandem_xml", xtandem_parser, iterate_tandem_rows)
    INSPECT = ("inspect", inspect_parser, iterate_tabular_rows)
    MSGFPLUS = ("msgfplus", msgfplus_parser, iterate_tabular_rows)
    MSALIGN = ("msalign", msalign_parser, iterate_tabular_rows)
    MODA = ("moda", moda_parser, iterate_tabular_rows)
    MODPLUS = ("modplus", modplus_parser, iterate_tabular_rows)
    MSPATHFINDER = ("mspathfinder", mspathfinder_parser, iterate_tabular_rows)
    TOPPIC = ("toppic", toppic_parser, iterate_tabular_rows)
    MAXQUANT = ("maxquant", maxquant_parser, iterate_tabular_rows)

    def __init__(self, label, parser_func, row_reader):
        self.label = label
        self.parser_func = parser_func
        self.row_reader = row_reader

    @property
    def engine(self) -> str:
        """Search engine name, shared by the text and XML flavours of X!Tandem."""
        return "xtandem" if self is ResultType.XTANDEM_XML else self.label

    def parse(self, row: dict) -> dict:
        """
        Map one native result row to unified fields.

        Parameters
        ----------
        row : dict
            Column name -> text, as yielded by ``rows``.

        Returns
        -------
        dict
            Unified field name -> text. Always holds ``scores`` (native
            score column -> text) and ``proteins`` (list of names); may
            hold ``modifications`` as ``(name, position)`` tuples.

        Raises
        ------
        ResultTypeNotSupported
            For ``ResultType.UNKNOWN``.
        """
        if self.parser_func is None:
            raise ResultTypeNotSupported(self.label, [r.label for r in ResultType if r.parser_func])
        return self.parser_func(row)

    def rows(self, path: str, chunk_size: int = 10000):
        """Yield ``(line_number, row, raw_text)`` for each record of a result file."""
        if self.row_reader is None:
            raise ResultTypeNotSupported(self.label, [r.label for r in ResultType if r.row_reader])
        return self.row_reader(path, chunk_size)

    @classmethod
    def select(cls, label: str):
        """
        Select a result type by its label.

        Parameters
        ----------
        label : str
            The label of the search engine result format. Options include:
            - 'sequest'
            - 'xtandem'
            - 'xtandem_xml'
            - 'inspect'
            - 'msgfplus'
            - 'msalign'
            - 'moda'
            - 'modplus'
            - 'mspathfinder'
            - 'toppic'
            - 'maxquant'

        Returns
        -------
        ResultType
            The corresponding `ResultType` enum member.

        Raises
        ------
        ResultTypeNotSupported
            If the provided label does not match any known result format.
        """
        for result_type in cls:
            if result_type.label == label.lower() and result_type.parser_func is not None:
                return result_type
        raise ResultTypeNotSupported(label, [r.label for r in cls if r.parser_func is not None])
