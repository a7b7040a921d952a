"""phrasedecl/phrase.py – phrase records and the word rules shared by both passes.

A :class:`Phrase` is created by the segmenter, filled in by the
classifier (pass 1), linked by the reference graph and finally given its
declarator text by the state machine (pass 2).  The output of a phrase is
assembled in an :class:`OutputBuffer`, a double-ended sequence of text
fragments: type keywords and pointer stars grow to the left, array
brackets and function parentheses grow to the right.
"""

from __future__ import annotations

import enum
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, FrozenSet, Optional, Tuple

from .basic_types import KEYWORDS, PLURAL_KEYWORDS


class PhraseKind(enum.Enum):
    BASIC = "basic"
    ARRAY = "array"
    POINTER = "pointer"
    FUNCTION = "function"


class Stage(enum.Enum):
    START = "start"
    CONTINUE = "continue"
    REFER = "refer"
    FINISHED = "finished"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

ARTICLES: Tuple[str, str] = ("a", "an")
SENTENCE_ARTICLES: Tuple[str, str] = ("A", "An")
VOWELS = "aeiou"

# Singular and plural noun for every complex kind, indexed by ``plural``.
KIND_NOUNS: Dict[PhraseKind, Tuple[str, str]] = {
    PhraseKind.ARRAY: ("array", "arrays"),
    PhraseKind.POINTER: ("pointer", "pointers"),
    PhraseKind.FUNCTION: ("function", "functions"),
}
DATUM_NOUNS: Tuple[str, str] = ("datum", "data")

# Word that follows the kind word (or the declared name) in a complex phrase.
GRAMMAR_KEYWORDS: Dict[PhraseKind, str] = {
    PhraseKind.ARRAY: "of",
    PhraseKind.POINTER: "to",
    PhraseKind.FUNCTION: "returning",
}

RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "an", "A", "An", "to", "of", "type", "the", "returning", "void",
        "array", "arrays", "pointer", "pointers", "function", "functions",
        "datum", "data",
    }
    | set(KEYWORDS)
    | set(PLURAL_KEYWORDS)
)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_permitted_name(word: str) -> bool:
    """True when *word* may be used as a variable name."""
    if word in RESERVED_WORDS:
        return False
    return _IDENTIFIER_RE.fullmatch(word) is not None


def starts_with_vowel(word: str) -> bool:
    return bool(word) and word[0] in VOWELS


def article_agrees(article: str, word: str, *, sentence_start: bool = False) -> bool:
    """Check ``a``/``an`` against the word that follows it.

    At the start of a phrase the article is capitalised.
    """
    consonant_form, vowel_form = SENTENCE_ARTICLES if sentence_start else ARTICLES
    if article == consonant_form:
        return not starts_with_vowel(word)
    if article == vowel_form:
        return starts_with_vowel(word)
    return False


def intrinsic_kind(word: str) -> PhraseKind:
    """Kind named by the first content word of a phrase."""
    for kind, (singular, _) in KIND_NOUNS.items():
        if word == singular:
            return kind
    return PhraseKind.BASIC


# ---------------------------------------------------------------------------
# Output buffer
# ---------------------------------------------------------------------------

class OutputBuffer:
    """Double-ended text buffer; fragments are joined on read."""

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: Deque[str] = deque()

    def prepend(self, text: str) -> None:
        self._parts.appendleft(text)

    def append(self, text: str) -> None:
        self._parts.append(text)

    def read(self) -> str:
        return "".join(self._parts)

    def clear(self) -> None:
        self._parts.clear()

    def __len__(self) -> int:
        return sum(len(p) for p in self._parts)

    def __str__(self) -> str:
        return self.read()

    def __repr__(self) -> str:
        return f"OutputBuffer({self.read()!r})"


# ---------------------------------------------------------------------------
# Phrase
# ---------------------------------------------------------------------------

@dataclass
class Phrase:
    """One full-stop-terminated sentence of the input."""

    index: int
    tokens: Tuple[str, ...]
    kind: PhraseKind = PhraseKind.BASIC
    declared_name: Optional[str] = None
    reference_name: Optional[str] = None
    continuation: Optional[int] = None
    stage: Stage = Stage.START
    output: OutputBuffer = field(default_factory=OutputBuffer, repr=False)

    @property
    def last(self) -> int:
        """Index of the last token."""
        return len(self.tokens) - 1

    @property
    def text(self) -> str:
        return " ".join(self.tokens) + "."

    @property
    def label(self) -> str:
        """Short name used in diagnostics."""
        if self.declared_name:
            return f"{self.declared_name} (phrase {self.index + 1})"
        return f"phrase {self.index + 1}"

    def __len__(self) -> int:
        return len(self.tokens)
