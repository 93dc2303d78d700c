"""CLI for formatting Clojure, ClojureScript and EDN source files."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from clj_sculptor import ClojureSyntaxError, format_source
from clj_sculptor.formatter import FormatterConfig


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rewrite a Clojure-family source file in canonical layout, keeping every comment."
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        help="Path to the source file to format.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="File to write the formatted source to (defaults to stdout).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log lexer, reader and renderer progress to stderr.",
    )
    args = parser.parse_args(argv)
    if not Path(args.input).is_file():
        parser.error(f"Input path does not exist: {args.input}")
    return args


def build_config(verbose: bool) -> FormatterConfig:
    return {
        "lexer_config": {"enable_logger": verbose},
        "reader_config": {"enable_logger": verbose},
        "renderer_config": {"enable_logger": verbose},
        "enable_logger": verbose,
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    source = Path(args.input)
    text = source.read_text(encoding="utf-8")
    try:
        formatted = format_source(text, config=build_config(args.verbose))
    except ClojureSyntaxError as exc:
        raise SystemExit(f"Failed to format {source}: {exc}") from exc
    if args.output is None:
        print(formatted)
        return
    destination = Path(args.output)
    destination.write_text(formatted + "\n", encoding="utf-8")
    print(f"Wrote {destination}")


if __name__ == "__main__":
    main()
