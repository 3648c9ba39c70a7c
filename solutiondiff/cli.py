"""CLI entrypoints for solutiondiff commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import DescriptorMissingError, SolutionDiffError
from .logging import configure_logging
from .models import DiffLineKind, UpdateRequest
from .orchestrator import Orchestrator

_DIFF_PREFIXES = {
    DiffLineKind.CONTEXT: " ",
    DiffLineKind.ADDED: "+",
    DiffLineKind.REMOVED: "-",
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of Markdown.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solutiondiff",
        description="Compare and patch solution packages (zip archives with a solution.xml).",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .solutiondiff.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare two solution packages and print a Markdown report.",
    )
    _add_verbose_option(compare_parser, suppress_default=True)
    _add_json_option(compare_parser)
    compare_parser.add_argument("package_a", help="Package treated as the baseline.")
    compare_parser.add_argument("package_b", help="Package compared against the baseline.")
    compare_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    compare_parser.add_argument(
        "--show-diff",
        action="store_true",
        help="Append the line diff of the two descriptors to the report.",
    )

    info_parser = subparsers.add_parser(
        "info",
        help="Show the descriptor metadata of one solution package.",
    )
    _add_verbose_option(info_parser, suppress_default=True)
    _add_json_option(info_parser)
    info_parser.add_argument("package", help="Path to the solution package.")

    update_parser = subparsers.add_parser(
        "update",
        help="Rewrite the descriptor inside a solution package.",
    )
    _add_verbose_option(update_parser, suppress_default=True)
    update_parser.add_argument("package", help="Path to the solution package.")
    update_parser.add_argument(
        "--set-version",
        dest="new_version",
        default=None,
        help="Replace the <Version> value.",
    )
    update_parser.add_argument(
        "--remove-generated-by",
        action="store_true",
        help="Strip the generatedBy provenance attribute.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP comparison service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for solutiondiff commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port, config=config)
        return

    orchestrator = Orchestrator(config)
    try:
        if args.command == "compare":
            _run_compare(orchestrator, args)
        elif args.command == "info":
            _run_info(orchestrator, args)
        elif args.command == "update":
            _run_update(orchestrator, args, parser)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except SolutionDiffError as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"solutiondiff {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_compare(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    result = orchestrator.compare(args.package_a, args.package_b)
    if args.json:
        output = json.dumps(result.to_dict(include_lines=bool(args.show_diff)), indent=2)
    else:
        output = orchestrator.render_report(result)
        if args.show_diff:
            diff_body = "\n".join(
                f"{_DIFF_PREFIXES[line.kind]}{line.content}" for line in result.diff_lines
            )
            output = f"{output}\n\n## Descriptor Diff\n\n```diff\n{diff_body}\n```"

    if args.output:
        target = Path(args.output)
        target.write_text(output + "\n", encoding="utf-8")
        print(f"Report written to {_relativize(target)}")
    else:
        print(output)


def _run_info(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    info = orchestrator.read_solution(args.package)
    if info is None:
        raise DescriptorMissingError(args.package, entry_name=orchestrator.entry_name)
    if args.json:
        print(json.dumps(info.to_dict(), indent=2))
        return
    print(f"Unique name:       {info.unique_name}")
    print(f"Version:           {info.version}")
    print(f"Publisher:         {info.publisher_unique_name}")
    print(f"Has generatedBy:   {'yes' if info.has_generated_by else 'no'}")
    components = orchestrator.parser.extract_components(info.raw_xml)
    print(f"Components:        {len(components)}")


def _run_update(
    orchestrator: Orchestrator,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> None:
    if not args.new_version and not args.remove_generated_by:
        parser.exit(1, "Nothing to update: pass --set-version and/or --remove-generated-by\n")
    info = orchestrator.update_solution(
        UpdateRequest(
            archive_path=Path(args.package),
            new_version=args.new_version,
            remove_generated_by=bool(args.remove_generated_by),
        )
    )
    print(f"{Path(args.package).name}: version {info.version}, generatedBy {'present' if info.has_generated_by else 'absent'}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
