"""CLI entrypoints for gqlscan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import ConfigError, GqlScanConfig, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_common_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Path to a .gqlscan.yml file (defaults to one next to the input path).",
    )
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write detailed logs to this file.",
    )


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "model",
        nargs="?",
        default=None,
        help="Model identifier to use (defaults to the configured model).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the timestamped results file (defaults to the working directory).",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds to wait between consecutive model calls.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gqlscan",
        description="Summarize the GraphQL queries and mutations used by each page of a frontend.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    pages_parser = subparsers.add_parser(
        "pages",
        help="Discover pages in a source text file, then list each page's operations.",
    )
    _add_common_options(pages_parser, suppress_default=True)
    pages_parser.add_argument("path", help="Path to the text file holding the source code.")
    _add_run_options(pages_parser)

    groups_parser = subparsers.add_parser(
        "groups",
        help="Scan a source tree and list the operations of each page folder.",
    )
    _add_common_options(groups_parser, suppress_default=True)
    groups_parser.add_argument("path", help="Path to the source directory to scan.")
    _add_run_options(groups_parser)
    groups_parser.add_argument(
        "--pages-root",
        default=None,
        help="Directory whose sub-folders define page groups (defaults to the scanned path).",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="List files containing GraphQL tags and their page groups without calling the model.",
    )
    _add_common_options(scan_parser, suppress_default=True)
    scan_parser.add_argument("path", help="Path to the source directory to scan.")
    scan_parser.add_argument(
        "--pages-root",
        default=None,
        help="Directory whose sub-folders define page groups (defaults to the scanned path).",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_common_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gqlscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    load_dotenv()

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(Path(args.config or args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "scan":
        pages_root = args.pages_root or _default_pages_root(config)
        orchestrator = Orchestrator.for_scanning(config)
        try:
            outcome = orchestrator.scan(args.path, pages_root)
        except OSError as exc:
            parser.exit(1, f"gqlscan scan failed: {exc}\n")
        for name, files in outcome.groups.items():
            print(f"{name}:")
            for file in files:
                print(f"  {file}")
        return

    if not config.llm.api_key:
        parser.exit(
            1,
            "No API key configured. Set OPENROUTER_API_KEY (or GQLSCAN_API_KEY) "
            "in the environment or a .env file.\n",
        )

    orchestrator = Orchestrator.from_config(
        config,
        model=args.model,
        output_dir=args.output_dir,
        interval=args.interval,
    )
    try:
        if args.command == "pages":
            outcome = orchestrator.run_pages(args.path)
        else:
            pages_root = args.pages_root or _default_pages_root(config)
            outcome = orchestrator.run_groups(args.path, pages_root)
    except (OSError, RuntimeError, ValueError) as exc:
        parser.exit(
            1,
            f"gqlscan {args.command} failed: {exc}\nRun with --verbose for more details.\n",
        )

    print(f"Results saved to {_relativize(outcome.output_path)}")


def _default_pages_root(config: GqlScanConfig) -> str | None:
    return str(config.scan.pages_root) if config.scan.pages_root else None


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
