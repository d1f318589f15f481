"""CLI entrypoints for runecho commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RunEchoConfig, load_config
from .generator import Generator
from .logging import WarningTally, configure_logging, get_logger
from .models import RepoIR
from .stores import IRFormatError, load_ir, save_ir
from .verify import check_determinism, check_path_variants, check_round_trip, path_variants

_SYMBOL_FIELDS = ("imports", "functions", "classes", "exports")


def _add_log_level_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="IR file location (defaults to the configured output, .ai/ir.json).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runecho",
        description="Build and verify a deterministic shallow IR of a source tree.",
    )
    _add_log_level_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Walk the repository and write a fresh IR.",
    )
    _add_log_level_options(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    _add_output_option(generate_parser)

    update_parser = subparsers.add_parser(
        "update",
        help="Refresh the stored IR, re-parsing only files whose content changed.",
    )
    _add_log_level_options(update_parser, suppress_default=True)
    _add_path_argument(update_parser)
    _add_output_option(update_parser)

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check that IR generation is byte-for-byte deterministic.",
    )
    _add_log_level_options(verify_parser, suppress_default=True)
    _add_path_argument(verify_parser)
    verify_parser.add_argument(
        "--runs",
        type=int,
        default=100,
        help="Number of repeated generations to compare (default: 100).",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Print the stored IR per file.",
    )
    _add_log_level_options(show_parser, suppress_default=True)
    _add_path_argument(show_parser)
    _add_output_option(show_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for runecho commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    tally = WarningTally()
    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet)).addHandler(tally)

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    # verify has no --output option.
    output_arg = getattr(args, "output", None)
    output = Path(output_arg) if output_arg else config.ir_path
    generator = Generator(config.generator_config())

    try:
        if args.command == "generate":
            _run_generate(args.path, output, generator)
        elif args.command == "update":
            _run_update(args.path, output, generator)
        elif args.command == "verify":
            if not _run_verify(args.path, args.runs, generator):
                parser.exit(1, "IR generation is not deterministic\n")
        elif args.command == "show":
            _run_show(output, config)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ValueError as exc:
        parser.exit(1, f"runecho {args.command} failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"runecho {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if tally.count:
        print(f"{tally.count} warning(s) during {args.command}; affected files were skipped")


def _run_generate(path: str, output: Path, generator: Generator) -> None:
    ir = generator.generate(path)
    target = save_ir(ir, output)
    print(f"IR written to {_relativize(target)} ({len(ir.files)} files, root hash {ir.root_hash})")


def _run_update(path: str, output: Path, generator: Generator) -> None:
    logger = get_logger("cli")
    prior: RepoIR | None
    try:
        prior = load_ir(output)
    except FileNotFoundError:
        logger.info("No IR at %s; generating from scratch", output)
        prior = None
    except IRFormatError as exc:
        logger.warning("Discarding unreadable IR (%s); generating from scratch", exc)
        prior = None

    if prior is None:
        ir = generator.generate(path)
        reused = 0
    else:
        ir = generator.update(prior, path)
        reused = sum(1 for key, entry in ir.files.items() if prior.files.get(key) is entry)

    target = save_ir(ir, output)
    if prior is not None and prior.root_hash == ir.root_hash:
        print(f"IR already up to date at {_relativize(target)} (root hash {ir.root_hash})")
        return
    print(
        f"IR updated at {_relativize(target)} "
        f"({len(ir.files)} files, {reused} reused, root hash {ir.root_hash})"
    )


def _run_verify(path: str, runs: int, generator: Generator) -> bool:
    reports = [
        check_determinism(path, runs=runs, generator=generator),
        check_path_variants(path_variants(path), generator=generator),
        check_round_trip(generator.generate(path)),
    ]
    for report in reports:
        status = "PASS" if report.passed else "FAIL"
        print(
            f"{status} {report.name}: {report.runs} runs, {report.size} bytes, "
            f"{report.file_count} files"
        )
        if not report.passed:
            print(f"  first difference at byte {report.first_difference}: {report.detail}")
    return all(report.passed for report in reports)


def _run_show(output: Path, config: RunEchoConfig) -> None:
    ir = load_ir(output)
    print(f"IR v{ir.version} for {config.root}")
    print(f"root hash: {ir.root_hash}")
    for path in sorted(ir.files):
        entry = ir.files[path]
        print(f"\n{path}  {entry.hash[:16]}")
        for name in _SYMBOL_FIELDS:
            values = getattr(entry, name)
            if values:
                print(f"  {name}: {', '.join(values)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
