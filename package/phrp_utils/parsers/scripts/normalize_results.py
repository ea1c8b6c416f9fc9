import argparse
import logging
import os

import pandas as pd

from ...data.diagnostics import DiagnosticKind
from ..reader import ReaderFactory, ReaderOptions

logger = logging.getLogger(__name__)


def default_output_path(result_path: str) -> str:
    base, _ = os.path.splitext(result_path)
    return base + "_PSMs.tsv"


def mod_summary_path(output_path: str) -> str:
    base, _ = os.path.splitext(output_path)
    return base + "_ModSummary.txt"


def main(args):
    options = ReaderOptions(
        deduplicate=args.dedup,
        enzyme=args.enzyme,
        mod_definitions_path=args.mod_defs,
        mass_correction_tags_path=args.mass_tags,
        search_engine_param_path=args.params,
        result_type=args.result_type,
    )
    output_path = args.output or default_output_path(args.input)

    with ReaderFactory(args.input, options) as reader:
        rows = [psm.to_dict() for psm in reader]
        diagnostics = reader.diagnostics
        catalog = reader.catalog

    pd.DataFrame(rows).to_csv(output_path, sep="\t", index=False)
    catalog.write_mod_summary(mod_summary_path(output_path))

    auto_defined = diagnostics.of_kind(DiagnosticKind.AUTO_DEFINED_MODIFICATION)
    logger.info(
        f"Wrote {len(rows)} PSMs to {output_path} "
        f"({len(diagnostics.warnings)} warnings, {len(auto_defined)} auto-defined modifications)"
    )


if __name__ == "__main__":

    parser = argparse.ArgumentParser(description="Normalize search engine results into one PSM table")
    parser.add_argument('-i', '--input', required=True, help="Search engine result file")
    parser.add_argument('-m', '--mod_defs', default=None, help="Modification definitions file")
    parser.add_argument('-t', '--mass_tags', default=None, help="Mass correction tags file")
    parser.add_argument('-p', '--params', default=None, help="Search tool parameter file")
    parser.add_argument('-r', '--result_type', default=None, help="Skip detection and read as this engine, e.g. msgfplus")
    parser.add_argument('-e', '--enzyme', default=None, help="Enzyme for cleavage state (default: from parameter file, else trypsin)")
    parser.add_argument('-o', '--output', default=None, help="Output tsv (default: <input>_PSMs.tsv)")
    parser.add_argument('-l', '--log_file', default=None, help="Also write the log to this file")
    parser.add_argument('--dedup', action="store_true", help="Drop PSMs repeating an earlier (scan, sequence, charge)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=args.log_file,
    )

    main(args)
