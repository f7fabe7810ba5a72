"""Command-line interface for pcgfmt."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pcgfmt.errors import ConfigError, format_diagnostic
from pcgfmt.formatter import FormatOptions

CONFIG_NAME = "pcgfmt.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    format: FormatOptions
    check: bool
    watch: bool
    debug: bool

    @property
    def display_name(self) -> str:
        return str(self.input_file) if self.input_file is not None else "<stdin>"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="pcgfmt",
        description="Format and validate PCG module grammars",
    )
    p.add_argument("input", help="Input grammar file ('-' for stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--indent-size",
        type=int,
        default=None,
        metavar="N",
        help="Spaces per indent level (default: 2)",
    )
    p.add_argument(
        "--use-tabs",
        action="store_true",
        default=None,
        help="Indent with one tab per level",
    )
    p.add_argument(
        "--no-newline-after-brackets",
        dest="newline_after_brackets",
        action="store_false",
        default=None,
        help="Keep content on the same line after '[' and '<'",
    )
    p.add_argument(
        "--no-newline-before-brackets",
        dest="newline_before_brackets",
        action="store_false",
        default=None,
        help="Keep content on the same line after '{'",
    )
    p.add_argument(
        "--no-final-newline",
        dest="final_newline",
        action="store_false",
        default=None,
        help="Do not end the output with a newline",
    )
    p.add_argument(
        "--no-trim-trailing-whitespace",
        dest="trim_trailing_whitespace",
        action="store_false",
        default=None,
        help="Keep trailing whitespace",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the input is not already formatted; write nothing",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and reformat")
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError("config", str(exc)) from exc

    fmt = FormatOptions()
    cfg_format = config.get("format")
    if isinstance(cfg_format, dict):
        fmt = FormatOptions.from_mapping(cfg_format, fmt)

    overrides: dict[str, Any] = {}
    if args.indent_size is not None:
        overrides["indent_size"] = args.indent_size
    if args.use_tabs is not None:
        overrides["use_tabs"] = args.use_tabs
    if args.newline_after_brackets is not None:
        overrides["insert_newline_after_brackets"] = args.newline_after_brackets
    if args.newline_before_brackets is not None:
        overrides["insert_newline_before_brackets"] = args.newline_before_brackets
    if args.final_newline is not None:
        overrides["insert_final_newline"] = args.final_newline
    if args.trim_trailing_whitespace is not None:
        overrides["trim_trailing_whitespace"] = args.trim_trailing_whitespace
    fmt = FormatOptions.from_mapping(overrides, fmt)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format=fmt,
        check=args.check,
        watch=args.watch,
        debug=args.debug,
    )


def read_source(options: CliOptions) -> str:
    if options.input_file is None:
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def format_source(source: str, options: CliOptions) -> tuple[str, bool]:
    """Format *source*, print its diagnostics to stderr, and return (text, clean)."""
    from pcgfmt import format
    from pcgfmt.debug import dump_tokens
    from pcgfmt.lexer import tokenize

    if options.debug:
        tokens, _ = tokenize(source)
        dump_tokens(tokens, file=sys.stderr)

    result = format(source, options.format)
    for diag in result.diagnostics:
        print(format_diagnostic(diag, source, options.display_name), file=sys.stderr)
    return result.text, not result.diagnostics


def write_output(text: str, options: CliOptions) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, reformat on each modification."""
    if options.input_file is None:
        print("error: --watch needs an input file", file=sys.stderr)
        return
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    text, _ = format_source(read_source(options), options)
                    write_output(text, options)
                    print(f"Formatted {options.input_file}", file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        source = read_source(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    text, clean = format_source(source, options)

    if options.check:
        if text != source:
            print(f"would reformat {options.display_name}", file=sys.stderr)
            return 1
        return 0 if clean else 1

    try:
        write_output(text, options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0 if clean else 1
