"""Interactive terminal mode for quiksearch."""

import argparse
import sys
import time
from typing import Iterable, Iterator, List, Optional, TextIO

import structlog

from .config import get_settings
from .core.engine import SearchEngine
from .core.exceptions import InvalidQuery
from .core.index import TrieIndex
from .log import configure_logging
from .models.request import SearchMode
from .sources import load_terms

logger = structlog.get_logger(__name__)


def prompt_lines(prompt: str = "> ") -> Iterator[str]:
    """Yield lines typed at the terminal until EOF or Ctrl-C."""
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            return


def repl(
    engine: SearchEngine,
    index: TrieIndex,
    args: argparse.Namespace,
    lines: Iterable[str],
    out: Optional[TextIO] = None,
) -> int:
    """
    Answer one query per input line.

    Returns:
        Number of queries answered
    """
    out = out or sys.stdout
    answered = 0
    for line in lines:
        query = line.strip()
        if not query:
            continue

        start = time.perf_counter()
        try:
            response = engine.search(
                index,
                query,
                mode=SearchMode(args.mode),
                fuzz=args.fuzz,
                depth=args.depth,
                allow_restart=not args.no_restart,
                max_results=args.limit,
                include_suggestions=True,
            )
        except InvalidQuery as e:
            print(f"  {e}", file=out)
            continue
        elapsed_ms = (time.perf_counter() - start) * 1000
        answered += 1

        print(f"Search took {elapsed_ms:.3f} ms", file=out)
        if response.results:
            print("You might have meant:", file=out)
            for result in response.results:
                print(f"  {result.rank:>3}. {result.display}  (cost {result.cost})", file=out)
            if response.budget_exceeded:
                print("  (search budget exceeded, results are partial)", file=out)
        else:
            print(f"No result for {query}", file=out)
            if response.suggestions:
                print("Close terms: " + ", ".join(response.suggestions), file=out)
    return answered


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="quiksearch",
        description="Find terms from a list by typing a mnemonic for them.",
    )
    parser.add_argument("terms_file", help="Text file with one term per line")
    parser.add_argument("--mode", choices=[mode.value for mode in SearchMode],
                        default=settings.default_mode, help="Matching algorithm")
    parser.add_argument("--fuzz", type=int, default=settings.default_fuzz,
                        help="Longest skip tried after a mismatch")
    parser.add_argument("--depth", type=int, default=settings.default_depth,
                        help="Extra trie levels collected after a match")
    parser.add_argument("--no-restart", action="store_true",
                        help="Do not restart matching at a new word")
    parser.add_argument("--limit", type=int, default=settings.max_results or None,
                        help="Maximum number of results shown")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log every query")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.fuzz < 0 or args.depth < 0:
        parser.error("--fuzz and --depth must be non-negative")

    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level, settings.log_format)

    engine = SearchEngine(settings)

    print("Predictive Search")
    start = time.perf_counter()
    try:
        index = engine.build_index(load_terms(args.terms_file))
    except OSError as e:
        logger.error("Failed to load terms", path=args.terms_file, error=str(e))
        return 1
    load_time = time.perf_counter() - start

    rate = len(index) / load_time if load_time > 0 else float(len(index))
    print(f"Loading took {load_time * 1000:.1f} ms, loaded {len(index)} terms: "
          f"about {int(rate)} terms per second")
    if index.rejected:
        print(f"Skipped {len(index.rejected)} terms without searchable characters")

    print("Enter query without whitespace, Ctrl-C to exit.")
    repl(engine, index, args, prompt_lines())
    return 0


if __name__ == "__main__":
    sys.exit(main())
