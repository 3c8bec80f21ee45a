import argparse
import os
import sys
from typing import List, Optional

from .env import load_env

from . import __version__
from .api import WorkableAPI
from .candidates import CandidateManager
from .jobs import JobManager
from .logger import get_logger


def cmd_get_jobs(api: WorkableAPI, args: argparse.Namespace) -> None:
    try:
        JobManager(api).process_all_jobs(args.base_dir, args.updated_after)
    except Exception as e:
        print(f"Error processing jobs: {e}", file=sys.stderr)
        raise SystemExit(1)


def cmd_get_candidates(api: WorkableAPI, args: argparse.Namespace) -> None:
    if not args.shortcode:
        print("Error: --shortcode is required when using --get-candidates", file=sys.stderr)
        raise SystemExit(1)
    try:
        CandidateManager(api).download_candidates(args.shortcode, args.base_dir, args.updated_after)
    except Exception as e:
        print(f"Error downloading candidates: {e}", file=sys.stderr)
        raise SystemExit(1)


def cmd_move_disqualified(api: WorkableAPI, args: argparse.Namespace) -> None:
    try:
        CandidateManager(api).move_disqualified_candidates(
            args.base_dir or os.getcwd(),
            args.move_disqualified_candidates_to,
        )
    except Exception as e:
        print(f"Error moving disqualified candidates: {e}", file=sys.stderr)
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wable", description="CLI tool for the Workable API")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--get-jobs", action="store_true", help="Process all jobs and download stages information")
    parser.add_argument("--get-candidates", action="store_true", help="Download candidates for a specific job")
    parser.add_argument("--shortcode", help="Job shortcode (required when using --get-candidates)")
    parser.add_argument("--updated-after", help="Filter jobs/candidates updated after this date (ISO format)")
    parser.add_argument(
        "--move-disqualified-candidates-to",
        metavar="DIRECTORY",
        help="Move disqualified candidates to specified directory",
    )
    parser.add_argument("--subdomain", default=None, help="Workable subdomain (or set WORKABLE_SUBDOMAIN)")
    parser.add_argument("--token", default=None, help="Workable API token (or set WORKABLE_TOKEN)")
    parser.add_argument("--base-dir", help="Base directory for outputs (default: current directory)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env if present (WORKABLE_SUBDOMAIN, WORKABLE_TOKEN, WABLE_LOG_LEVEL)
    load_env()
    args = build_parser().parse_args(argv)

    logger = get_logger()
    logger.set_level(os.getenv("WABLE_LOG_LEVEL", "INFO"))

    subdomain = args.subdomain or os.getenv("WORKABLE_SUBDOMAIN")
    token = args.token or os.getenv("WORKABLE_TOKEN")
    if not subdomain or not token:
        print("Error: --subdomain and --token are required", file=sys.stderr)
        raise SystemExit(1)

    api = WorkableAPI(subdomain, token)

    if args.get_jobs:
        cmd_get_jobs(api, args)
    if args.get_candidates:
        cmd_get_candidates(api, args)
    if args.move_disqualified_candidates_to:
        cmd_move_disqualified(api, args)

    logger.log_metrics_summary()


if __name__ == "__main__":
    main()
