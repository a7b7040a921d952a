"""phrasedecl/segmenter.py – input text → phrases.

Splits whitespace-delimited words into phrases at every word that ends
in a full stop, and strips that full stop.  The split is described by a
small PEG grammar (parsimonious) and collected by a ``NodeVisitor``::

    text          = ws phrase* trailing
    phrase        = (open_word ws)* closing_word ws

``trailing`` soaks up any words after the last full stop so that the
grammar always matches; a non-empty trailer is reported as a
:class:`~phrasedecl.errors.StructuralError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from .errors import DeclErrorCodes, PhraseSpan, StructuralError
from .phrase import Phrase

logger = logging.getLogger(__name__)


SEGMENT_GRAMMAR = Grammar(r'''
    text          = ws phrase* trailing
    phrase        = (open_word ws)* closing_word ws
    trailing      = (open_word ws)*

    closing_word  = ~r"\S*\.(?!\S)"
    open_word     = ~r"\S*[^\s.](?!\S)"
    ws            = ~r"\s*"
''')


@dataclass(frozen=True)
class _RawPhrase:
    words: Tuple[str, ...]
    offset: int


class PhraseCollector(NodeVisitor):
    """Transforms the parse tree into raw phrases and trailing words."""

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    def visit_text(self, node: Node, visited_children: List[Any]) -> Any:
        _, phrases, trailing = visited_children
        return self._items(phrases), trailing

    def visit_phrase(self, node: Node, visited_children: List[Any]) -> _RawPhrase:
        opening, closing, _ = visited_children
        words = [pair[0] for pair in self._items(opening)]
        words.append(closing)
        return _RawPhrase(tuple(words), node.start)

    def visit_trailing(self, node: Node, visited_children: List[Any]) -> List[str]:
        return [pair[0] for pair in self._items(visited_children)]

    def visit_closing_word(self, node: Node, visited_children: List[Any]) -> str:
        return node.text[:-1]

    def visit_open_word(self, node: Node, visited_children: List[Any]) -> str:
        return node.text

    def visit_ws(self, node: Node, visited_children: List[Any]) -> None:
        return None

    @staticmethod
    def _items(value: Any) -> List[Any]:
        # An unmatched ``*`` comes back as the bare node.
        return value if isinstance(value, list) else []


def segment(text: str) -> List[Phrase]:
    """Split *text* into phrases, stripping each closing full stop."""
    try:
        tree = SEGMENT_GRAMMAR.parse(text)
    except ParseError as exc:
        raise StructuralError(
            f"cannot split input into phrases: {exc}",
            code=DeclErrorCodes.MISSING_FULL_STOP,
        ) from exc

    raw_phrases, trailing = PhraseCollector().visit(tree)

    if trailing:
        raise StructuralError(
            f"input does not end with a full stop (trailing: {' '.join(trailing)!r})",
            code=DeclErrorCodes.MISSING_FULL_STOP,
            span=PhraseSpan(len(raw_phrases)),
        )
    if not raw_phrases:
        raise StructuralError("no phrase in input", code=DeclErrorCodes.EMPTY_INPUT)

    phrases: List[Phrase] = []
    for index, raw in enumerate(raw_phrases):
        for position, word in enumerate(raw.words):
            if not word:
                raise StructuralError(
                    "a full stop must end a word",
                    code=DeclErrorCodes.EMPTY_WORD,
                    span=PhraseSpan(index, position),
                )
        phrases.append(Phrase(index=index, tokens=raw.words))

    logger.debug("segmented %d phrase(s)", len(phrases))
    return phrases


def segment_words(words: Iterable[str]) -> List[Phrase]:
    """Segment an already split word sequence (e.g. ``sys.argv[1:]``)."""
    return segment(" ".join(words))


__all__ = ["SEGMENT_GRAMMAR", "PhraseCollector", "segment", "segment_words"]
