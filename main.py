"""Command-line interface for KEGG ID lookup by formula and compound name."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from keggmatch import (
    KeggClient,
    check_issues,
    match_batch,
    normalize_formula,
    normalize_name,
    read_input_csv,
    summarize_status,
    validate_new_columns,
    write_output_csv,
)
from keggmatch.kegg import DEFAULT_TIMEOUT, KEGG_BASE_URL
from keggmatch.matching import DEFAULT_DELAY, DEFAULT_SIMILARITY_THRESHOLD

logger = logging.getLogger("keggmatch.cli")


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", required=True, help="Path to input CSV with columns 'Standardized_Name' and 'Formula'.")
    parser.add_argument("--output", required=True, help="Destination path for CSV with KEGG IDs.")
    parser.add_argument("--sep", default=",", help="CSV delimiter (default ',').")
    parser.add_argument("--encoding", default="utf-8", help="File encoding (default utf-8).")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default INFO).")
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_SIMILARITY_THRESHOLD,
        help=f"Similarity threshold for auto-acceptance (default {DEFAULT_SIMILARITY_THRESHOLD}).",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_DELAY,
        help=f"Delay in seconds between KEGG lookups (default {DEFAULT_DELAY}).",
    )
    parser.add_argument(
        "--standardize",
        action="store_true",
        help="Derive 'Standardized_Name' from --name-column and clean formulas before matching.",
    )
    parser.add_argument("--name-column", default="Name", help="Raw name column used with --standardize (default 'Name').")
    parser.add_argument("--formula-column", default="Formula", help="Formula column (default 'Formula').")
    parser.add_argument("--kegg-url", default=KEGG_BASE_URL, help=f"KEGG REST endpoint (default {KEGG_BASE_URL}).")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"HTTP timeout in seconds (default {DEFAULT_TIMEOUT:g}).",
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure basic logging."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )


# ---------------------------------------------------------------------------
# Main execution
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for KEGG ID lookup."""

    args = parse_args(argv)
    setup_logging(args.log_level)

    name_column = args.name_column if args.standardize else "Standardized_Name"
    df = read_input_csv(
        args.input,
        sep=args.sep,
        encoding=args.encoding,
        required=[name_column, args.formula_column],
    )
    # Derived columns must not replace input data; the formula column is
    # only cleaned in place when it already is "Formula".
    if args.formula_column != "Formula":
        validate_new_columns(df, ["Formula"])
    if args.standardize:
        validate_new_columns(df, ["Standardized_Name"])
        df["Standardized_Name"] = normalize_name(df[args.name_column])
        df["Formula"] = normalize_formula(df[args.formula_column])
    elif args.formula_column != "Formula":
        df["Formula"] = df[args.formula_column]

    client = KeggClient(base_url=args.kegg_url, timeout=args.timeout)
    out_df = match_batch(df, similarity_threshold=args.threshold, delay=args.delay, client=client)
    out_df = check_issues(out_df)
    write_output_csv(out_df, args.output, sep=args.sep, encoding=args.encoding)

    for status, count in summarize_status(out_df).items():
        logger.info("%s: %d", status, count)


if __name__ == "__main__":
    main()
