"""CLI commands for star-range collection."""

import argparse
import logging
from pathlib import Path


def _add_range_args(parser, required=False):
    parser.add_argument(
        "--min-stars",
        type=int,
        default=None,
        required=required,
        help="Lowest star count (inclusive)" + ("" if required else ", default: MIN_STARS setting"),
    )
    parser.add_argument(
        "--max-stars",
        type=int,
        default=None,
        required=required,
        help="Highest star count (inclusive)" + ("" if required else ", default: MAX_STARS setting"),
    )


def _add_db_arg(parser):
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Sheet database path (default: results/sheets.db)",
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Collect GitHub repositories by star range",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).parent.parent / "results",
        help="Output directory for results",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch subcommand
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch every repo in a star range into a master sheet",
    )
    _add_range_args(fetch_parser)
    fetch_parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Stars per chunk (default: 500)",
    )
    fetch_parser.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Max repos kept per chunk (default: 1000)",
    )
    _add_db_arg(fetch_parser)

    # merge subcommand
    merge_parser = subparsers.add_parser(
        "merge",
        help="Merge leftover chunk sheets in a star range into the master sheet",
    )
    _add_range_args(merge_parser, required=True)
    _add_db_arg(merge_parser)

    # export subcommand
    export_parser = subparsers.add_parser(
        "export",
        help="Export a master sheet to CSV",
    )
    _add_range_args(export_parser, required=True)
    export_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output CSV file (default: results/AllRepos_<min>_to_<max>.csv)",
    )
    _add_db_arg(export_parser)

    # sheets subcommand
    sheets_parser = subparsers.add_parser(
        "sheets",
        help="List sheets and their row counts",
    )
    _add_db_arg(sheets_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db_path = getattr(args, "db", None) or (args.output_dir / "sheets.db")

    if args.command == "fetch":
        from .fetch_star_ranges import fetch_star_ranges
        from .settings import get_settings

        settings = get_settings()
        min_stars = args.min_stars if args.min_stars is not None else settings.min_stars
        max_stars = args.max_stars if args.max_stars is not None else settings.max_stars

        run = fetch_star_ranges(
            min_stars,
            max_stars,
            db_path=db_path,
            chunk_size=args.chunk_size if args.chunk_size is not None else settings.chunk_size,
            capacity=args.capacity if args.capacity is not None else settings.chunk_capacity,
            page_size=settings.page_size,
        )
        if run is None:
            return 1
        print(f"\nDone: {run.row_count:,} rows in {run.master_label}, {len(run.degraded)} degraded chunks")
    elif args.command == "merge":
        from .exceptions import InvalidRangeError
        from .fetch_star_ranges.plan_chunks import validate_range
        from .merge_chunks import merge_chunks
        from .models import SheetKey, master_label
        from .sheets import SheetStore

        try:
            star_range = validate_range(args.min_stars, args.max_stars)
        except InvalidRangeError as e:
            logging.getLogger(__name__).error("Invalid star range: %s", e)
            return 1

        sheets = SheetStore(db_path)
        sheets.init()
        keys = [
            s.key
            for s in sheets.list_sheets(kind="chunk")
            if s.key.low >= star_range.low and s.key.high <= star_range.high
        ]
        label = master_label(star_range.low, star_range.high)
        if not keys:
            logging.getLogger(__name__).info(
                "No leftover chunk sheets for stars=%d..%d, leaving %s as is",
                star_range.low, star_range.high, label,
            )
            return 0
        # Leftover chunks are appended; rows already merged stay in the master
        result = merge_chunks(sheets, keys, SheetKey.master(star_range.low, star_range.high), label, append=True)
        print(f"\nDone: {result.row_count:,} rows in {label} from {len(result.merged)} chunks")
    elif args.command == "export":
        from .export import export_sheet_csv
        from .models import SheetKey, master_label
        from .sheets import SheetStore

        sheets = SheetStore(db_path)
        sheets.init()
        output = args.output or (args.output_dir / f"{master_label(args.min_stars, args.max_stars)}.csv")
        try:
            count = export_sheet_csv(sheets, SheetKey.master(args.min_stars, args.max_stars), output)
        except LookupError as e:
            logging.getLogger(__name__).error("%s", e)
            return 1
        print(f"Exported {count:,} rows to {output}")
    elif args.command == "sheets":
        from .sheets import SheetStore

        sheets = SheetStore(db_path)
        sheets.init()
        for sheet in sheets.list_sheets():
            print(f"{sheet.key.kind:<7} {sheet.key.low:>9}..{sheet.key.high:<9} {sheets.row_count(sheet):>6}  {sheet.name}")
    else:
        parser.print_help()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
