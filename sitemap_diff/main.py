"""Main entry point for the sitemap diff command-line tool."""

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version

from .config import Settings
from .errors import SitemapDiffError
from .logger import default_logger
from .processor import SitemapComparer
from .report import ReportWriter, format_summary, is_valid_output_file

_EPILOG = """\
Sitemap locations (must end with .xml):
  ./some/dir/local-sitemap.xml                     local file
  https://www.example.com/sitemap.xml              URL
  s3://bucket-name/sitemap.xml                     S3 object, default region
  s3://bucket-name/sitemap.xml:region://us-west-2  S3 object in us-west-2

S3 credentials are taken from the local AWS configuration. The protocol and
host of each URL are ignored: "http://a.com/about" and "https://b.com/about"
have the same path. Sitemap index files are not supported.
"""


def _package_version() -> str:
    try:
        return version("sitemap-diff")
    except PackageNotFoundError:
        return "unknown"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitemap-diff",
        description="Compare the URL paths of two sitemap.xml files.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("sitemap1", help="Path, URL or S3 location of the first sitemap.")
    parser.add_argument("sitemap2", help="Path, URL or S3 location of the second sitemap.")
    parser.add_argument(
        "-e",
        "--exclude",
        default="",
        help="Comma-separated paths to leave out of the comparison, e.g. '/,/about'.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the full result as JSON to this .json file instead of printing it.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug", action="store_true", help="Show debug diagnostics."
    )
    verbosity.add_argument(
        "--quiet", action="store_true", help="Hide info and debug diagnostics."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP request timeout in seconds (default: SITEMAP_DIFF_TIMEOUT or 30).",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {_package_version()}"
    )
    return parser


def main(argv=None):
    """Parses command-line arguments and compares the two sitemaps."""
    args = _build_parser().parse_args(argv)

    # --- Argument Validation ---
    if args.output is not None and not is_valid_output_file(args.output):
        print(
            'Error: Invalid output file name. Must be a valid JSON file (e.g., "output.json").',
            file=sys.stderr,
        )
        sys.exit(1)
    if args.timeout is not None and args.timeout <= 0:
        print("Error: --timeout must be a positive number.", file=sys.stderr)
        sys.exit(1)

    try:
        settings = Settings.from_env()
        default_logger.set_level(settings.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    exclude_paths = [path.strip() for path in args.exclude.split(",") if path.strip()]
    log_level = "debug" if args.debug else "quiet" if args.quiet else None

    comparer = SitemapComparer(logger=default_logger, timeout=args.timeout)
    try:
        result = comparer.compare_paths(
            args.sitemap1,
            args.sitemap2,
            log_level=log_level,
            exclude_paths=exclude_paths,
        )
    except SitemapDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        if not ReportWriter.save(args.output, result, default_logger):
            sys.exit(1)
        print(f"Sitemap paths and differences successfully written to {args.output}")
    else:
        print(format_summary(result))


if __name__ == "__main__":
    main()
