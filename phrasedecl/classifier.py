"""phrasedecl/classifier.py – pass 1 over the phrases.

Establishes each phrase's kind and names, and fully resolves basic
phrases such as ``An unsigned long X.``.  Complex phrases (array,
pointer, function) are left in :attr:`Stage.START` for the declarator
state machine.
"""

from __future__ import annotations

import logging
from typing import Iterable

from . import basic_types
from .errors import (
    DeclError,
    DeclErrorCodes,
    IdentifierError,
    LexicalError,
    PhraseSpan,
    StructuralError,
)
from .phrase import (
    GRAMMAR_KEYWORDS,
    Phrase,
    PhraseKind,
    Stage,
    article_agrees,
    intrinsic_kind,
    is_permitted_name,
    starts_with_vowel,
)

logger = logging.getLogger(__name__)

MIN_BASIC_WORDS = 2
MIN_COMPLEX_WORDS = 4


def classify(phrase: Phrase) -> Phrase:
    """Fill in kind, declared name and reference name of *phrase*."""
    try:
        _classify(phrase)
    except DeclError as err:
        phrase.stage = Stage.ERROR
        raise err.locate(phrase.index, text=phrase.text)
    return phrase


def classify_all(phrases: Iterable[Phrase]) -> None:
    for phrase in phrases:
        classify(phrase)


def _classify(phrase: Phrase) -> None:
    tokens = phrase.tokens
    phrase.stage = Stage.START
    phrase.kind = PhraseKind.BASIC
    phrase.declared_name = None
    phrase.reference_name = None
    phrase.continuation = None
    phrase.output.clear()

    if len(tokens) < MIN_BASIC_WORDS:
        raise StructuralError(
            f"a phrase needs at least {MIN_BASIC_WORDS} words",
            code=DeclErrorCodes.PHRASE_TOO_SHORT,
            span=PhraseSpan(phrase.index),
        )

    if not article_agrees(tokens[0], tokens[1], sentence_start=True):
        raise LexicalError(
            f"phrase must open with 'A' or 'An' agreeing with {tokens[1]!r}, got {tokens[0]!r}",
            code=DeclErrorCodes.ARTICLE_MISMATCH,
            span=PhraseSpan(phrase.index, 0),
            word=tokens[0],
            hint=f"write '{'An' if starts_with_vowel(tokens[1]) else 'A'} {tokens[1]}'",
        )

    phrase.kind = intrinsic_kind(tokens[1])
    if phrase.kind is PhraseKind.BASIC:
        _resolve_basic(phrase)
        return

    if len(tokens) < MIN_COMPLEX_WORDS:
        raise StructuralError(
            f"a {phrase.kind.value} phrase needs at least {MIN_COMPLEX_WORDS} words",
            code=DeclErrorCodes.PHRASE_TOO_SHORT,
            span=PhraseSpan(phrase.index),
        )

    # "A pointer p to ...": anything other than the grammar keyword in
    # third position is the declared name.
    candidate = tokens[2]
    if candidate != GRAMMAR_KEYWORDS[phrase.kind]:
        if not is_permitted_name(candidate):
            raise IdentifierError(candidate, span=PhraseSpan(phrase.index, 2))
        phrase.declared_name = candidate

    if is_permitted_name(tokens[-1]):
        phrase.reference_name = tokens[-1]

    logger.debug(
        "phrase %d: %s declared=%s reference=%s",
        phrase.index, phrase.kind.value, phrase.declared_name, phrase.reference_name,
    )


def _resolve_basic(phrase: Phrase) -> None:
    tokens = phrase.tokens
    last = tokens[-1]
    if basic_types.is_keyword(last):
        run = tokens[1:]
    else:
        if not is_permitted_name(last):
            raise IdentifierError(last, span=PhraseSpan(phrase.index, phrase.last))
        phrase.declared_name = last
        phrase.output.append(last)
        phrase.output.prepend(" ")
        run = tokens[1:-1]

    try:
        text = basic_types.describe(run)
    except DeclError as err:
        raise err.locate(phrase.index)
    phrase.output.prepend(text)
    phrase.stage = Stage.FINISHED
    logger.debug("phrase %d: basic %r", phrase.index, phrase.output.read())


__all__ = ["MIN_BASIC_WORDS", "MIN_COMPLEX_WORDS", "classify", "classify_all"]
