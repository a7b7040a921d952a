"""phrasedecl/references.py – links between phrases.

A phrase that ends in a variable name refers to the phrase that declares
that name.  The link, called the phrase's *continuation*, is what the
declarator follows for ``... of type the type of X``.  Links are built
once, after pass 1, and checked for cycles before pass 2 starts so that
following them always terminates.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .errors import CycleError, PhraseSpan, ReferenceResolutionError
from .phrase import Phrase

logger = logging.getLogger(__name__)


class ReferenceGraph:
    """Continuation edges over a fixed phrase set."""

    def __init__(self, phrases: Sequence[Phrase]) -> None:
        self._phrases = list(phrases)

    @classmethod
    def build(cls, phrases: Sequence[Phrase]) -> "ReferenceGraph":
        """Link every reference and reject cycles."""
        graph = cls(phrases)
        graph.link()
        graph.check_cycles()
        return graph

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def link(self) -> None:
        for phrase in self._phrases:
            phrase.continuation = None
            name = phrase.reference_name
            if name is None:
                continue
            matches = [p.index for p in self._phrases if p.declared_name == name]
            if len(matches) != 1:
                err = ReferenceResolutionError(
                    name,
                    matches,
                    span=PhraseSpan(phrase.index, phrase.last),
                ).locate(phrase.index, text=phrase.text)
                declared = sorted(self.declarations())
                if not matches and declared:
                    err.add_note("declared names: " + ", ".join(declared))
                raise err
            phrase.continuation = matches[0]
            logger.debug("phrase %d refers to phrase %d via %r", phrase.index, matches[0], name)

    def check_cycles(self) -> None:
        """Walk the continuation chain from every phrase.

        Each walk gets its own visited set, seeded with its start.
        """
        for start in self._phrases:
            visited: Set[int] = {start.index}
            path: List[int] = [start.index]
            nxt = start.continuation
            while nxt is not None:
                if nxt in visited:
                    path.append(nxt)
                    raise CycleError(
                        [self._phrases[i].label for i in path],
                        span=PhraseSpan(start.index),
                    ).locate(start.index, text=start.text)
                visited.add(nxt)
                path.append(nxt)
                nxt = self._phrases[nxt].continuation

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def target(self, phrase: Phrase) -> Optional[Phrase]:
        if phrase.continuation is None:
            return None
        return self._phrases[phrase.continuation]

    def edges(self) -> Iterator[Tuple[int, int]]:
        for phrase in self._phrases:
            if phrase.continuation is not None:
                yield phrase.index, phrase.continuation

    def declarations(self) -> Dict[str, List[int]]:
        """Declared name → indices of the phrases declaring it."""
        names: Dict[str, List[int]] = {}
        for phrase in self._phrases:
            if phrase.declared_name is not None:
                names.setdefault(phrase.declared_name, []).append(phrase.index)
        return names


__all__ = ["ReferenceGraph"]
