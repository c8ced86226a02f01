"""
Command-line interface for the Subjacent Markov Chain.

Builds a chain from text files, URLs, a saved snapshot or PostgreSQL, then composes
sentences from it, either once or in an interactive prompt loop.
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import TextIO

import psycopg

from .. import config
from ..engine.chain import MarkovChain, Seed
from ..engine.lexer import Lexer, words
from ..engine.selectors import SELECTORS, Selector, get_selector
from ..errors import ChainError
from ..ingest.corpus import load_sources
from ..storage import postgres
from ..storage.snapshot import load_chain, save_chain

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )


def load_stored_chain(name: str) -> MarkovChain:
    """Rebuild a chain stored in PostgreSQL."""
    conn = postgres.connect()
    try:
        return postgres.load_chain(conn, name)
    finally:
        conn.close()


def build_chain(args: argparse.Namespace) -> MarkovChain | None:
    """
    Start from a snapshot or stored chain (if any) and ingest every file
    and URL given.

    Returns None, after logging why, when the starting chain cannot be
    loaded.
    """
    chain = MarkovChain()
    if getattr(args, "load", None):
        try:
            chain = load_chain(args.load)
        except (OSError, ValueError) as exc:
            logger.error("Cannot load snapshot %s: %s", args.load, exc)
            return None
    elif getattr(args, "db_load", None):
        try:
            chain = load_stored_chain(args.db_load)
        except (KeyError, psycopg.Error) as exc:
            logger.error("Cannot load stored chain %r: %s", args.db_load, exc)
            return None

    total = load_sources(chain, getattr(args, "files", ()), getattr(args, "url", None) or ())
    if total:
        logger.info("Ingested %d lines; chain has %d textlets, %d edges",
                    total, chain.num_textlets(), chain.num_edges())
    return chain


def pick_seed(prompt: str, rng: random.Random | None = None) -> Seed:
    """Seed from a random word of the prompt, or a random seed if it has none."""
    candidates = words(prompt) if prompt else []
    if not candidates:
        return Seed.random()
    return Seed.word((rng or random).choice(candidates))


def produce(chain: MarkovChain, prompt: str, selector: Selector, max_len: int | None) -> str:
    """Compose a sentence for a prompt; errors come back as text."""
    try:
        return str(chain.compose_sentence(pick_seed(prompt), selector, max_len))
    except ChainError as exc:
        return f"{{ ERROR: {exc} }}"


def run_repl(
    chain: MarkovChain,
    selector: Selector,
    max_len: int | None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Read lines until EOF; learn each one, then answer with a sentence."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    stdout.write("> ")
    stdout.flush()

    for line in stdin:
        prompt = line.strip()
        if prompt:
            chain.parse_sentence(prompt)
        stdout.write(f"{produce(chain, prompt, selector, max_len)}\n\n> ")
        stdout.flush()

    stdout.write("\n")
    return 0


def cmd_repl(args: argparse.Namespace) -> int:
    """Interactive prompt loop."""
    chain = build_chain(args)
    if chain is None:
        return 1
    selector = get_selector(args.selector)
    run_repl(chain, selector, args.max_len)
    if args.save:
        save_chain(chain, args.save)
    return 0


def cmd_compose(args: argparse.Namespace) -> int:
    """Compose sentences from a chain."""
    chain = build_chain(args)
    if chain is None:
        return 1
    selector = get_selector(args.selector)
    seed = Seed.word(args.seed) if args.seed else Seed.random()

    status = 0
    for _ in range(args.count):
        try:
            print(chain.compose_sentence(seed, selector, args.max_len))
        except ChainError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            status = 1
            break
    return status


def cmd_tokenize(args: argparse.Namespace) -> int:
    """Tokenize text and show tokens."""
    print(f"Text: {args.text!r}")
    for i, token in enumerate(Lexer(args.text)):
        print(f"  {i}: {token!r}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show chain size and most observed edges."""
    chain = build_chain(args)
    if chain is None:
        return 1
    print(f"Textlets: {chain.num_textlets()}")
    print(f"Edges:    {chain.num_edges()}")
    print(f"Hits:     {chain.total_hits()}")
    print(f"Seeds:    {len(chain.seeds())}")
    print()
    print(chain)
    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Build a chain and save it to a snapshot file."""
    chain = build_chain(args)
    if chain is None:
        return 1
    save_chain(chain, args.out)
    print(f"Saved {chain.num_textlets()} textlets, {chain.num_edges()} edges to {args.out}")
    return 0


def cmd_db_save(args: argparse.Namespace) -> int:
    """Build a chain and store it in PostgreSQL under a name."""
    chain = build_chain(args)
    if chain is None:
        return 1
    try:
        conn = postgres.connect()
        try:
            postgres.init_schema(conn)
            chain_id = postgres.store_chain(conn, args.name, chain)
        finally:
            conn.close()
    except psycopg.Error as exc:
        logger.error("Cannot store chain %r: %s", args.name, exc)
        return 1
    print(f"Stored {args.name!r} (id {chain_id}): "
          f"{chain.num_textlets()} textlets, {chain.num_edges()} edges")
    return 0


def cmd_db_list(args: argparse.Namespace) -> int:
    """List chains stored in PostgreSQL."""
    try:
        conn = postgres.connect()
        try:
            rows = postgres.list_chains(conn)
        finally:
            conn.close()
    except psycopg.Error as exc:
        logger.error("Cannot list stored chains: %s", exc)
        return 1
    if not rows:
        print("No stored chains")
    for name, textlets, edges in rows:
        print(f"  {name}: {textlets} textlets, {edges} edges")
    return 0


def _max_len(value: str) -> int | None:
    if value.lower() in ("none", "0"):
        return None
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError("max length must be positive")
    return n


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="*", help="Text files to learn from, one sentence per line")
    parser.add_argument("--url", action="append", help="Plain-text URL to learn from (repeatable)")
    start = parser.add_mutually_exclusive_group()
    start.add_argument("--load", help="Start from a saved chain snapshot")
    start.add_argument("--db-load", metavar="NAME", help="Start from a chain stored in PostgreSQL")


def _add_compose_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--selector",
        choices=sorted(SELECTORS),
        default=config.DEFAULT_SELECTOR,
        help=f"Edge selection policy (default: {config.DEFAULT_SELECTOR})",
    )
    parser.add_argument(
        "--max-len",
        type=_max_len,
        default=config.DEFAULT_MAX_LEN,
        help=f"Longest sentence in characters; 'none' for unbounded (default: {config.DEFAULT_MAX_LEN})",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="smc",
        description="Subjacent Markov Chain - learn word transitions and compose sentences",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # REPL command
    repl_parser = subparsers.add_parser("repl", help="Interactive prompt loop")
    _add_source_args(repl_parser)
    _add_compose_args(repl_parser)
    repl_parser.add_argument("--save", help="Save the chain snapshot on exit")
    repl_parser.set_defaults(func=cmd_repl)

    # Compose command
    compose_parser = subparsers.add_parser("compose", help="Compose sentences")
    _add_source_args(compose_parser)
    _add_compose_args(compose_parser)
    compose_parser.add_argument("--seed", help="Word to start from (default: random)")
    compose_parser.add_argument("-n", "--count", type=int, default=1, help="Number of sentences")
    compose_parser.set_defaults(func=cmd_compose)

    # Tokenize command
    tokenize_parser = subparsers.add_parser("tokenize", help="Tokenize text")
    tokenize_parser.add_argument("text", help="Text to tokenize")
    tokenize_parser.set_defaults(func=cmd_tokenize)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show chain statistics")
    _add_source_args(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    # Snapshot command
    snapshot_parser = subparsers.add_parser("snapshot", help="Build and save a chain")
    _add_source_args(snapshot_parser)
    snapshot_parser.add_argument("--out", required=True, help="Snapshot file to write")
    snapshot_parser.set_defaults(func=cmd_snapshot)

    # Database commands
    db_save_parser = subparsers.add_parser("db-save", help="Build a chain and store it in PostgreSQL")
    db_save_parser.add_argument("name", help="Name to store the chain under")
    _add_source_args(db_save_parser)
    db_save_parser.set_defaults(func=cmd_db_save)

    db_list_parser = subparsers.add_parser("db-list", help="List chains stored in PostgreSQL")
    db_list_parser.set_defaults(func=cmd_db_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # Default to the prompt loop with nothing learned yet
        args = parser.parse_args([*argv, "repl"])

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
