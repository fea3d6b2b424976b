"""Command-line interface for Clay: parse files or run the REPL."""

from __future__ import annotations

import argparse
import io
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TextIO

from clay import __version__
from clay.errors import LexError, ParseError

DEFAULT_PROMPT = "#> "


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_file: Path | None
    show_tokens: bool
    prompt: str
    watch: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="clay",
        description="Clay language parser; starts a REPL when no file is given",
    )
    p.add_argument("input", nargs="?", help="Input .clay file")
    p.add_argument("-o", "--output", help="Output file for the dump (default: stdout)")
    p.add_argument(
        "--tokens",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Dump the token stream instead of the AST (--no-tokens overrides the config)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover clay.toml)",
    )
    p.add_argument("--prompt", default=None, help=f"REPL prompt (default: {DEFAULT_PROMPT!r})")
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-parse")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / "clay.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input) if args.input else None
    if input_file is not None and input_file.parent.parts:
        base_dir = input_file.parent
    else:
        base_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, base_dir)

    # Token dump: config < CLI
    show_tokens = False
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_tokens = cfg_output.get("tokens")
        if isinstance(cfg_tokens, bool):
            show_tokens = cfg_tokens
    if args.tokens is not None:
        show_tokens = args.tokens

    # REPL prompt: config < CLI
    prompt = DEFAULT_PROMPT
    cfg_repl = config.get("repl")
    if isinstance(cfg_repl, dict):
        cfg_prompt = cfg_repl.get("prompt")
        if isinstance(cfg_prompt, str):
            prompt = cfg_prompt
    if args.prompt is not None:
        prompt = args.prompt

    if args.watch and input_file is None:
        raise argparse.ArgumentTypeError("--watch requires an input file")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        show_tokens=show_tokens,
        prompt=prompt,
        watch=args.watch,
    )


def render_source(source: str, filename: str, show_tokens: bool, out: TextIO) -> None:
    """Tokenize and parse *source*, writing the token list or AST dump to *out*."""
    from clay.debug import dump_ast, dump_tokens
    from clay.lexer import tokenize
    from clay.parser import Parser

    tokens = tokenize(source, filename)
    if show_tokens:
        dump_tokens(tokens, file=out)
        return
    program = Parser(tokens, source, filename).parse_program()
    dump_ast(program, file=out)


def parse_file(options: CliOptions) -> None:
    """Read and parse the input file, writing the dump to the output."""
    assert options.input_file is not None
    source = options.input_file.read_text(encoding="utf-8")
    buf = io.StringIO()
    render_source(source, str(options.input_file), options.show_tokens, buf)
    if options.output_file:
        options.output_file.write_text(buf.getvalue(), encoding="utf-8")
    else:
        sys.stdout.write(buf.getvalue())


def run_repl(options: CliOptions, read_line: Callable[[str], str] = input) -> None:
    """Parse one line at a time until 'exit' or end of input.

    Errors are reported and the loop moves on to the next line.
    """
    print(f"Clay language REPL @{__version__}")
    print("Type `exit` to exit.")
    while True:
        try:
            line = read_line(options.prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            return
        text = line.strip()
        if text == "exit":
            return
        if not text:
            continue
        try:
            render_source(text, "<repl>", options.show_tokens, sys.stdout)
        except (LexError, ParseError) as exc:
            print(exc.format("<repl>"), file=sys.stderr)


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-parse on each modification."""
    assert options.input_file is not None
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
                    parse_file(options)
                    print(f"Parsed {options.input_file}", file=sys.stderr)
                except (LexError, ParseError) as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.input_file is None:
        run_repl(options)
        return 0

    if options.watch:
        watch_loop(options)
        return 0

    try:
        parse_file(options)
    except (LexError, ParseError) as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0
