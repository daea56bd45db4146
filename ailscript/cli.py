"""Command line entry point for the script and archive tools."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from tqdm import tqdm

from . import archive, importer
from .disassembler import render_json
from .exceptions import ScriptError
from .logging_config import close_trace_logger, configure_console_logging, configure_trace_logger
from .options import ScriptOptions
from .pool import DEFAULT_ENCODING
from .script import Script
from .versions import DEFAULT_VERSION, version_choices

LOGGER = logging.getLogger(__name__)


def _add_script_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        dest="script_version",
        choices=version_choices(),
        default=DEFAULT_VERSION,
        help="Script format version (default: %(default)s)",
    )
    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help="Text encoding of the input script (default: %(default)s)",
    )
    parser.add_argument(
        "--trace",
        type=Path,
        help="Write a per-instruction decode trace to this file (a directory of traces in batch mode)",
    )


def _add_import_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", type=Path, help="Script to patch")
    parser.add_argument("translation", type=Path, help="Translation text file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Patched script path")
    parser.add_argument("--output-encoding", help="Encoding for imported text (default: input encoding)")
    parser.add_argument(
        "--allow-offset-overflow",
        action="store_true",
        help="Wrap pool offsets above 0xFFFF instead of failing",
    )
    _add_script_arguments(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ailscript", description="AIL script and archive tools")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    disasm = sub.add_parser("disasm", help="Write a disassembly listing")
    disasm.add_argument("input", type=Path, help="Script file or directory of scripts")
    disasm.add_argument("-o", "--output", type=Path, required=True, help="Listing file or directory")
    disasm.add_argument("--json", action="store_true", help="Emit JSON instead of a text listing")
    _add_script_arguments(disasm)

    export = sub.add_parser("export", help="Export strings to a translation file")
    export.add_argument("input", type=Path, help="Script file or directory of scripts")
    export.add_argument("-o", "--output", type=Path, required=True, help="Text file or directory")
    _add_script_arguments(export)

    append = sub.add_parser("import", help="Import text by appending changed strings to the pool")
    _add_import_arguments(append)

    rebuild = sub.add_parser("rebuild", help="Import text and rebuild the whole string pool")
    _add_import_arguments(rebuild)

    unpack = sub.add_parser("unpack", help="Extract an archive")
    unpack.add_argument("input", type=Path, help="Archive file")
    unpack.add_argument("output", type=Path, help="Destination directory")

    pack = sub.add_parser("pack", help="Create an archive from numbered files")
    pack.add_argument("input", type=Path, help="Directory holding 00000, 00001, ...")
    pack.add_argument("output", type=Path, help="Archive file to write")

    return parser


def _options(args: argparse.Namespace) -> ScriptOptions:
    return ScriptOptions(
        version=args.script_version,
        encoding=args.encoding,
        output_encoding=getattr(args, "output_encoding", None),
        allow_offset_overflow=getattr(args, "allow_offset_overflow", False),
    )


def _load(path: Path, args: argparse.Namespace, trace_path: Optional[Path] = None) -> Script:
    trace = configure_trace_logger(trace_path) if trace_path is not None else None
    try:
        return Script.load(path, _options(args), trace=trace)
    finally:
        if trace is not None:
            close_trace_logger(trace)


def _for_each_script(
    args: argparse.Namespace,
    suffix: str,
    action: Callable[[Script, Path], object],
) -> int:
    """Run ``action`` on one script, or on every file when the input is a directory."""

    if not args.input.is_dir():
        action(_load(args.input, args, args.trace), args.output)
        return 0

    sources = sorted(path for path in args.input.iterdir() if path.is_file())
    args.output.mkdir(parents=True, exist_ok=True)
    failures = 0
    for path in tqdm(sources, desc=args.command):
        try:
            trace_path = args.trace / f"{path.name}.log" if args.trace else None
            action(_load(path, args, trace_path), args.output / f"{path.name}{suffix}")
        except ScriptError as exc:
            LOGGER.error("%s: %s", path.name, exc)
            failures += 1
    if failures:
        LOGGER.warning("%d of %d file(s) failed", failures, len(sources))
        return 1
    return 0


def _write_disassembly(args: argparse.Namespace) -> Callable[[Script, Path], object]:
    def action(script: Script, target: Path) -> object:
        if not args.json:
            return script.export_disassembly(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_json(script.instructions), encoding="utf-8")
        return target

    return action


def _run_import(args: argparse.Namespace, mode: str) -> int:
    script = _load(args.input, args, args.trace)
    report = script.import_text(args.translation, mode=mode)
    script.save(args.output)
    print(
        f"{mode}: patched {report.patched}/{report.references} reference(s), "
        f"pool {report.pool_before} -> {report.pool_after} bytes"
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_console_logging(args.verbose)

    try:
        if args.command == "disasm":
            return _for_each_script(args, ".json" if args.json else ".txt", _write_disassembly(args))
        if args.command == "export":
            return _for_each_script(args, ".txt", lambda script, target: script.export_text(target))
        if args.command == "import":
            return _run_import(args, importer.APPEND)
        if args.command == "rebuild":
            return _run_import(args, importer.REBUILD)
        if args.command == "unpack":
            written: List[Path] = archive.extract(args.input, args.output)
            print(f"Extracted {len(written)} file(s) to {args.output}")
            return 0
        if args.command == "pack":
            archive.create(args.input, args.output)
            print(f"Packed {args.input} into {args.output}")
            return 0
    except (ScriptError, OSError, LookupError) as exc:
        LOGGER.error("%s", exc)
        return 1

    parser.error("Unhandled command")
    return 2


if __name__ == "__main__":  # pragma: no cover - CLI wrapper
    raise SystemExit(main())
