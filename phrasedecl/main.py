#!/usr/bin/env python3
"""phrasedecl/main.py — CLI entry-point for the phrase → declarator translator.

Usage examples
--------------
    # Phrases as command-line words
    phrasedecl A pointer to a function returning void.

    # Phrases from a file or from stdin
    phrasedecl -i phrases.txt
    echo "An array of 3 ints." | phrasedecl

    # Long-form grammar only
    phrasedecl --strict An array of 3 data of type int.

    # JSON output, or an explanation of why the input was rejected
    phrasedecl --format json An int X.
    phrasedecl --explain A pointer to an pointer.

Exit codes
----------
    0   Success; one declarator line per phrase.
    1   Input rejected; ``Incorrect input`` is printed instead.
    2   Infrastructure failure (unreadable input file, bad option).
  130   Interrupted.

The module doubles as ``python -m phrasedecl`` via the companion
``phrasedecl/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from . import __version__
from .engine import Translator, TranslatorConfig
from .errors import DeclError
from .segmenter import segment, segment_words

_log = logging.getLogger("phrasedecl")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_INTERRUPTED: int = 130


# ===========================================================================
# Utility helpers
# ===========================================================================

_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)
_LOG_FORMAT = logging.Formatter(
    fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


def _configure_logging(verbosity: int) -> logging.Logger:
    """Point the ``phrasedecl`` logger at stderr.

    ``-v`` gives INFO, ``-vv`` and beyond DEBUG.  Calling it again replaces
    the handler installed by the previous call.
    """
    logger = logging.getLogger("phrasedecl")
    logger.setLevel(_LOG_LEVELS[min(max(verbosity, 0), len(_LOG_LEVELS) - 1)])
    for old in [h for h in logger.handlers if getattr(h, "_phrasedecl_cli", False)]:
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_LOG_FORMAT)
    handler._phrasedecl_cli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def _read_input(source: str) -> str:
    """Return the text of *source*; ``"-"`` is stdin."""
    if source == "-":
        return sys.stdin.read()
    p = Path(source).expanduser().resolve()
    if not p.exists():
        _log.error("input file not found: %s", p)
        raise SystemExit(EXIT_INFRA)
    return p.read_text(encoding="utf-8")


def _write_lines(lines: Sequence[str], stream: TextIO) -> None:
    for line in lines:
        stream.write(line + "\n")


# ===========================================================================
# Command
# ===========================================================================

def cmd_translate(args: argparse.Namespace) -> int:
    config = TranslatorConfig(
        failure_message=args.failure_message,
        allow_shorthand=not args.strict,
    )
    translator = Translator(config)

    try:
        if args.words:
            phrases = segment_words(args.words)
        else:
            phrases = segment(_read_input(args.input))
        result = translator.run(phrases)
    except DeclError as err:
        print(config.failure_message)
        if args.explain:
            if args.format == "json":
                print(json.dumps(err.to_json(), indent=2), file=sys.stderr)
            else:
                print(err.to_gcc_format(), file=sys.stderr)
        return EXIT_ERROR

    if args.format == "json":
        print(json.dumps(result.to_json(), indent=2))
    else:
        _write_lines(result.lines, sys.stdout)
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phrasedecl",
        description="Translate English type phrases into C declarators.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  phrasedecl A pointer to a function returning void.\n"
            "  phrasedecl An array a of 3 pointers to data of type char.\n"
        ),
    )
    parser.add_argument(
        "words",
        nargs="*",
        metavar="WORD",
        help="Phrase words; each phrase ends with a full stop. "
             "Without words the input is read from --input.",
    )
    parser.add_argument(
        "-i", "--input",
        default="-",
        metavar="FILE",
        help='Read phrases from FILE ("-" for stdin, the default).',
    )
    parser.add_argument(
        "-f", "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Accept only the long form ('a datum of type int'), "
             "not basic types named directly ('an int').",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="On rejection, print the reason on stderr.",
    )
    parser.add_argument(
        "--failure-message",
        default=TranslatorConfig.failure_message,
        metavar="TEXT",
        help="Line printed when the input is rejected (default: %(default)r).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.set_defaults(func=cmd_translate)
    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the phrasedecl CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return EXIT_INTERRUPTED
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except OSError as exc:
        _log.error("cannot read input: %s", exc)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
