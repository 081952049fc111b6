from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lark import UnexpectedInput

from .errors import FlatastError
from .lark_ingest import make_parser, parse_to_ast, table_from_lark
from .registry import TokenRegistry
from .render import render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    grammar_path: str = "grammar.lark"
    start: str = "start"
    parser_kind: str = "lalr"
    zero_based: bool = False


def run(src: str, options: RunOptions) -> str:
    """Parse ``src`` with the configured grammar and return the rendered AST."""
    grammar = Path(options.grammar_path).read_text(encoding="utf-8")
    parser = make_parser(grammar, start=options.start, parser_kind=options.parser_kind)
    registry = TokenRegistry.build(table_from_lark(parser))
    logger.debug("parsing %d characters with %s (%s)", len(src), options.grammar_path, options.parser_kind)

    ast = parse_to_ast(src, parser, registry, zero_based=options.zero_based)
    return render(ast)


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise the argument is a path; a missing file raises.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    return Path(arg).read_text(encoding="utf-8")


def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="flatast", description="Print the flattened AST of a source file")
    ap.add_argument("source", nargs="?", help="Path to a source file (defaults to stdin)")
    ap.add_argument("-g", "--grammar", default="grammar.lark", help="Path to a lark grammar")
    ap.add_argument("--start", default="start", help="Start rule of the grammar")
    ap.add_argument("--earley", action="store_true", help="Use Earley")
    ap.add_argument("--lalr", action="store_true", help="Use LALR (default)")
    ap.add_argument("--zero-based", action="store_true", help="Report 0-based lines and columns")
    ap.add_argument("-o", "--output", help="Write the rendering to this file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = RunOptions(
        grammar_path=args.grammar,
        start=args.start,
        parser_kind="earley" if args.earley and not args.lalr else "lalr",
        zero_based=args.zero_based,
    )
    source = _load_source(args.source)

    try:
        out = run(source, options)
    except (UnexpectedInput, FlatastError) as err:
        sys.stderr.write(f"{type(err).__name__}: {err}\n")
        sys.exit(1)

    if args.output:
        Path(args.output).write_text(out, encoding="utf-8")
    else:
        sys.stdout.write(out)


if __name__ == "__main__":
    main()
