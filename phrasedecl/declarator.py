"""phrasedecl/declarator.py – pass 2: the declarator state machine.

Each complex phrase is interpreted word by word.  Handlers, one per
:class:`~phrasedecl.phrase.PhraseKind`, consume words and write
fragments into the *originating* phrase's output buffer:

* ``*`` and type keywords are prepended,
* ``[N]`` and ``()`` are appended,
* a pointer to an array or a function is wrapped in ``( ... )`` so that
  ``A pointer to an array of 2 ints.`` gives ``int (*)[2]``.

Every handler returns the next :class:`~phrasedecl.phrase.Stage`:

    START ──► CONTINUE ──► ... ──► FINISHED
       │          ▲
       └─► REFER ─┘      (``of type the type of X``)

In REFER the context switches to the phrase declaring ``X``; words are
read from that phrase while output still goes to the originating one.
Any violation raises a :class:`~phrasedecl.errors.DeclError` and marks
the originating phrase :attr:`Stage.ERROR`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from . import basic_types
from .errors import (
    DeclError,
    DeclErrorCodes,
    InternalError,
    LexicalError,
    PhraseSpan,
    StructuralError,
)
from .phrase import (
    ARTICLES,
    DATUM_NOUNS,
    KIND_NOUNS,
    Phrase,
    PhraseKind,
    Stage,
    article_agrees,
    starts_with_vowel,
)
from .references import ReferenceGraph

logger = logging.getLogger(__name__)

_DIMENSION_RE = re.compile(r"[1-9][0-9]*")

_BRACKETED = (PhraseKind.ARRAY, PhraseKind.FUNCTION)


def _article_hint(word: str) -> str:
    return f"write '{'an' if starts_with_vowel(word) else 'a'} {word}'"


@dataclass
class ResolutionContext:
    """Where pass 2 is reading from and writing to."""

    origin: Phrase
    phrase: Phrase
    kind: PhraseKind
    cursor: int = 1
    plural: bool = False

    @property
    def word(self) -> str:
        return self.phrase.tokens[self.cursor]

    @property
    def stage(self) -> Stage:
        return self.origin.stage

    def span(self, offset: int = 0) -> PhraseSpan:
        return PhraseSpan(self.phrase.index, self.cursor + offset)

    def prepend(self, text: str) -> None:
        self.origin.output.prepend(text)

    def append(self, text: str) -> None:
        self.origin.output.append(text)

    def advance(self) -> None:
        if self.cursor >= self.phrase.last:
            raise StructuralError(
                f"phrase ends after {self.word!r}",
                code=DeclErrorCodes.UNEXPECTED_END,
                span=self.span(),
            )
        self.cursor += 1

    def expect(self, word: str) -> None:
        if self.word != word:
            raise LexicalError(
                f"expected {word!r}, got {self.word!r}",
                span=self.span(),
                word=self.word,
            )

    def follow(self, target: Phrase) -> None:
        """Continue reading from *target*, starting at its kind word."""
        self.phrase = target
        self.cursor = 1
        self.kind = target.kind


Handler = Callable[[ResolutionContext], Stage]


class DeclaratorMachine:
    """Runs pass 2 over classified and linked phrases."""

    def __init__(
        self,
        phrases: Sequence[Phrase],
        graph: ReferenceGraph,
        *,
        allow_shorthand: bool = True,
    ) -> None:
        self._phrases = list(phrases)
        self._graph = graph
        self._allow_shorthand = allow_shorthand
        self._handlers: Dict[PhraseKind, Handler] = {
            PhraseKind.BASIC: self._basic,
            PhraseKind.ARRAY: self._array,
            PhraseKind.POINTER: self._pointer,
            PhraseKind.FUNCTION: self._function,
        }

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def resolve(self, phrase: Phrase) -> str:
        """Drive *phrase* to FINISHED and return its declarator text."""
        if phrase.stage is Stage.FINISHED:
            return phrase.output.read()
        if phrase.stage is not Stage.START:
            raise InternalError(f"phrase {phrase.index + 1} is in stage {phrase.stage.value}")

        ctx = ResolutionContext(origin=phrase, phrase=phrase, kind=phrase.kind)
        try:
            while phrase.stage is not Stage.FINISHED:
                phrase.stage = self._handlers[ctx.kind](ctx)
                logger.debug(
                    "phrase %d: %s -> %s at %d:%d %r",
                    phrase.index, ctx.kind.value, phrase.stage.value,
                    ctx.phrase.index, ctx.cursor, phrase.output.read(),
                )
        except DeclError as err:
            phrase.stage = Stage.ERROR
            raise err.locate(ctx.phrase.index, ctx.cursor, ctx.phrase.text)
        return phrase.output.read()

    def resolve_all(self, phrases: Optional[Iterable[Phrase]] = None) -> List[str]:
        return [self.resolve(p) for p in (self._phrases if phrases is None else phrases)]

    # ------------------------------------------------------------------
    # Kind handlers
    # ------------------------------------------------------------------

    def _array(self, ctx: ResolutionContext) -> Stage:
        self._skip_declared_name(ctx)
        ctx.expect("of")
        ctx.advance()
        count = self._dimension(ctx)
        ctx.append(f"[{count}]")
        ctx.advance()
        return self._element(
            ctx,
            plural=count > 1,
            kinds=(PhraseKind.ARRAY, PhraseKind.POINTER),
        )

    def _pointer(self, ctx: ResolutionContext) -> Stage:
        plural = ctx.word.endswith("s")
        self._skip_declared_name(ctx)
        ctx.expect("to")
        ctx.advance()
        ctx.prepend("*")
        if ctx.word == "void":
            return self._void(ctx)
        if self._is_bare_reference(ctx):
            return self._follow_reference(ctx, previous=PhraseKind.POINTER)
        # "pointers to an int": each pointer has a singular target.
        if not plural or ctx.word in ARTICLES:
            self._article(ctx)
            plural = False
        return self._element(
            ctx,
            plural=plural,
            kinds=(PhraseKind.POINTER, PhraseKind.ARRAY, PhraseKind.FUNCTION),
            parenthesize=True,
        )

    def _function(self, ctx: ResolutionContext) -> Stage:
        self._skip_declared_name(ctx)
        ctx.expect("returning")
        ctx.advance()
        ctx.append("()")
        if ctx.word == "void":
            return self._void(ctx)
        if self._is_bare_reference(ctx):
            return self._follow_reference(ctx, previous=PhraseKind.FUNCTION)
        self._article(ctx)
        return self._element(ctx, plural=False, kinds=(PhraseKind.POINTER,))

    def _basic(self, ctx: ResolutionContext) -> Stage:
        tokens = ctx.phrase.tokens
        if ctx.stage is Stage.REFER:
            # The referenced phrase ends in its declared name.
            run = tokens[ctx.cursor:ctx.phrase.last]
        else:
            end = len(tokens)
            if ctx.phrase.reference_name is not None and tokens[-1] == ctx.phrase.reference_name:
                end -= 1
            run = tokens[ctx.cursor:end]
        try:
            text = basic_types.describe(run, plural=ctx.plural)
        except DeclError as err:
            raise err.locate(ctx.phrase.index, ctx.cursor, ctx.phrase.text)
        ctx.prepend(text)
        return Stage.FINISHED

    # ------------------------------------------------------------------
    # Shared grammar pieces
    # ------------------------------------------------------------------

    def _skip_declared_name(self, ctx: ResolutionContext) -> None:
        """Move from the kind word to the grammar keyword."""
        ctx.advance()
        if ctx.stage is Stage.START and ctx.phrase.declared_name is not None:
            ctx.prepend(ctx.phrase.declared_name)
            ctx.advance()
        elif ctx.stage is Stage.REFER:
            ctx.advance()

    def _dimension(self, ctx: ResolutionContext) -> int:
        if _DIMENSION_RE.fullmatch(ctx.word) is None:
            raise LexicalError(
                f"array size must be a positive decimal integer, got {ctx.word!r}",
                code=DeclErrorCodes.BAD_DIMENSION,
                span=ctx.span(),
                word=ctx.word,
            )
        return int(ctx.word)

    def _article(self, ctx: ResolutionContext) -> None:
        article = ctx.word
        if article not in ARTICLES:
            raise LexicalError(
                f"expected 'a' or 'an', got {article!r}",
                code=DeclErrorCodes.MISSING_ARTICLE,
                span=ctx.span(),
                word=article,
            )
        ctx.advance()
        if not article_agrees(article, ctx.word):
            raise LexicalError(
                f"{article!r} does not agree with {ctx.word!r}",
                code=DeclErrorCodes.ARTICLE_MISMATCH,
                span=ctx.span(-1),
                word=article,
                hint=_article_hint(ctx.word),
            )

    def _void(self, ctx: ResolutionContext) -> Stage:
        ctx.prepend("void ")
        rest = ctx.phrase.tokens[ctx.cursor + 1:]
        if rest and list(rest) != [ctx.phrase.reference_name]:
            raise LexicalError(
                f"unexpected {rest[0]!r} after 'void'",
                code=DeclErrorCodes.TRAILING_WORD,
                span=ctx.span(1),
                word=rest[0],
            )
        return Stage.FINISHED

    def _element(
        self,
        ctx: ResolutionContext,
        *,
        plural: bool,
        kinds: Tuple[PhraseKind, ...],
        parenthesize: bool = False,
    ) -> Stage:
        """Dispatch on what an array holds, a pointer targets or a function returns."""
        word = ctx.word
        if word == DATUM_NOUNS[plural]:
            return self._data_continuation(ctx)

        for kind in kinds:
            if word == KIND_NOUNS[kind][plural]:
                if parenthesize and kind in _BRACKETED:
                    ctx.prepend("(")
                    ctx.append(")")
                ctx.kind = kind
                return Stage.CONTINUE

        if self._allow_shorthand and basic_types.is_basic_word(word, plural=plural):
            ctx.prepend(" ")
            ctx.kind = PhraseKind.BASIC
            ctx.plural = plural
            return Stage.CONTINUE

        if self._is_bare_reference(ctx):
            return self._follow_reference(ctx, previous=ctx.kind)

        other = not plural
        other_forms = {DATUM_NOUNS[other]} | {KIND_NOUNS[k][other] for k in kinds}
        if self._allow_shorthand:
            other_forms |= set(basic_types.PLURAL_KEYWORDS) if other else set()
        if word in other_forms:
            raise LexicalError(
                f"{word!r} does not agree in number with what precedes it",
                code=DeclErrorCodes.NUMBER_MISMATCH,
                span=ctx.span(),
                word=word,
            )
        raise LexicalError(
            f"unexpected {word!r}",
            span=ctx.span(),
            word=word,
        )

    def _data_continuation(self, ctx: ResolutionContext) -> Stage:
        """``datum of type <basic>`` or ``datum of type the type of X``."""
        previous = ctx.kind
        ctx.kind = PhraseKind.BASIC
        ctx.plural = False
        ctx.advance()
        ctx.expect("of")
        ctx.advance()
        ctx.expect("type")
        ctx.advance()
        if ctx.word != "the":
            ctx.prepend(" ")
            return Stage.CONTINUE

        ctx.advance()
        ctx.expect("type")
        ctx.advance()
        ctx.expect("of")
        ctx.advance()
        name = ctx.phrase.reference_name
        if name is None or ctx.word != name or ctx.cursor != ctx.phrase.last:
            raise LexicalError(
                f"'the type of' must be followed by the phrase's final variable name, got {ctx.word!r}",
                code=DeclErrorCodes.MISPLACED_REFERENCE,
                span=ctx.span(),
                word=ctx.word,
            )

        return self._follow_reference(ctx, previous=previous)

    def _is_bare_reference(self, ctx: ResolutionContext) -> bool:
        """True for ``An array of 2 X.``: the reference stands in for the type."""
        return (
            self._allow_shorthand
            and ctx.cursor == ctx.phrase.last
            and ctx.word == ctx.phrase.reference_name
        )

    def _follow_reference(self, ctx: ResolutionContext, *, previous: PhraseKind) -> Stage:
        name = ctx.phrase.reference_name
        target = self._graph.target(ctx.phrase)
        if target is None:
            raise InternalError(f"reference {name!r} was never linked")
        logger.debug("phrase %d: following %r to phrase %d", ctx.origin.index, name, target.index)
        ctx.follow(target)
        ctx.plural = False
        if target.kind is PhraseKind.BASIC:
            ctx.prepend(" ")
        if previous is PhraseKind.POINTER and target.kind in _BRACKETED:
            ctx.prepend("(")
            ctx.append(")")
        return Stage.REFER


__all__ = ["ResolutionContext", "DeclaratorMachine"]
