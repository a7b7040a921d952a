"""phrasedecl/basic_types.py – basic-type keyword runs → canonical C type.

A run such as ``unsigned long long`` is folded into a :class:`BasicType`
bitmask, canonicalised (``long`` implies ``int``, ``int`` implies
``signed`` unless ``unsigned``) and validated, then looked up in
:data:`RENDERINGS`.

Every function here is pure; errors are raised, never returned.
"""

from __future__ import annotations

import enum
from typing import Dict, Final, Iterable, List, Sequence

from .errors import (
    DeclErrorCodes,
    InternalError,
    LexicalError,
    StructuralError,
    TypeCombinationError,
)


class BasicType(enum.IntFlag):
    NONE = 0
    INT = 1
    CHAR = 2
    DOUBLE = 4
    FLOAT = 8
    SIGNED = 16
    UNSIGNED = 32
    SHORT = 64
    LONG = 128
    LONGLONG = 256


KEYWORDS: Final[Dict[str, BasicType]] = {
    "int": BasicType.INT,
    "char": BasicType.CHAR,
    "double": BasicType.DOUBLE,
    "float": BasicType.FLOAT,
    "signed": BasicType.SIGNED,
    "unsigned": BasicType.UNSIGNED,
    "short": BasicType.SHORT,
    "long": BasicType.LONG,
}

PLURAL_KEYWORDS: Final[Dict[str, str]] = {word + "s": word for word in KEYWORDS}

_B = BasicType
RENDERINGS: Final[Dict[BasicType, str]] = {
    _B.CHAR | _B.SIGNED: "signed char",
    _B.CHAR | _B.UNSIGNED: "unsigned char",
    _B.CHAR: "char",
    _B.DOUBLE: "double",
    _B.DOUBLE | _B.LONG: "long double",
    _B.FLOAT: "float",
    _B.INT | _B.LONGLONG | _B.SIGNED: "long long",
    _B.INT | _B.LONGLONG | _B.UNSIGNED: "unsigned long long",
    _B.INT | _B.LONG | _B.SIGNED: "long",
    _B.INT | _B.LONG | _B.UNSIGNED: "unsigned long",
    _B.INT | _B.SHORT | _B.SIGNED: "short",
    _B.INT | _B.SHORT | _B.UNSIGNED: "unsigned short",
    _B.INT | _B.SIGNED: "int",
    _B.INT | _B.UNSIGNED: "unsigned",
}

_SIZES = _B.SHORT | _B.LONG | _B.LONGLONG


def is_keyword(word: str) -> bool:
    return word in KEYWORDS


def is_basic_word(word: str, *, plural: bool = False) -> bool:
    """True when *word* can open a basic-type run.

    In a plural position the run may be a single pluralised keyword
    (``ints``) or start with a plain qualifier (``unsigned ints``).
    """
    return word in KEYWORDS or (plural and word in PLURAL_KEYWORDS)


def singularize(words: Sequence[str], *, plural: bool) -> List[str]:
    """Check number agreement of a run and strip the plural ``s``.

    A plural run carries the ``s`` on its last word only; a singular run
    carries none.
    """
    result = list(words)
    if not result:
        return result
    *head, last = result
    for word in head:
        if word in PLURAL_KEYWORDS:
            raise LexicalError(
                f"only the last word of a type may be plural, got {word!r}",
                code=DeclErrorCodes.NUMBER_MISMATCH,
                word=word,
            )
    if plural:
        if last not in PLURAL_KEYWORDS:
            raise LexicalError(
                f"expected a plural type name, got {last!r}",
                code=DeclErrorCodes.NUMBER_MISMATCH,
                word=last,
            )
        result[-1] = PLURAL_KEYWORDS[last]
    elif last in PLURAL_KEYWORDS:
        raise LexicalError(
            f"expected a singular type name, got {last!r}",
            code=DeclErrorCodes.NUMBER_MISMATCH,
            word=last,
        )
    return result


def accumulate(words: Iterable[str]) -> BasicType:
    """Fold keywords into a raw bitmask (no canonicalisation)."""
    mask = BasicType.NONE
    for word in words:
        bit = KEYWORDS.get(word)
        if bit is None:
            raise LexicalError(
                f"{word!r} is not a basic type keyword",
                code=DeclErrorCodes.UNKNOWN_KEYWORD,
                word=word,
            )
        if bit is BasicType.LONG:
            if mask & BasicType.LONGLONG:
                raise TypeCombinationError(
                    "'long' given more than twice",
                    code=DeclErrorCodes.TOO_MANY_LONGS,
                )
            if mask & BasicType.LONG:
                mask = (mask & ~BasicType.LONG) | BasicType.LONGLONG
            else:
                mask |= BasicType.LONG
        elif mask & bit:
            raise TypeCombinationError(
                f"{word!r} given more than once",
                code=DeclErrorCodes.REPEATED_KEYWORD,
            )
        else:
            mask |= bit
    return mask


def canonicalize(mask: BasicType) -> BasicType:
    """Apply the implied keywords and reject illegal combinations."""
    if not mask:
        raise StructuralError(
            "no basic type given",
            code=DeclErrorCodes.EMPTY_BASIC_TYPE,
        )

    if not mask & (_B.CHAR | _B.DOUBLE | _B.FLOAT):
        mask |= _B.INT
    if mask & _B.INT and not mask & _B.UNSIGNED:
        mask |= _B.SIGNED

    def illegal(why: str) -> TypeCombinationError:
        return TypeCombinationError(
            f"illegal basic type: {why}",
            code=DeclErrorCodes.ILLEGAL_COMBINATION,
        )

    if mask & _B.SIGNED and mask & _B.UNSIGNED:
        raise illegal("both signed and unsigned")
    if mask & _B.INT:
        if mask & (_B.CHAR | _B.DOUBLE | _B.FLOAT):
            raise illegal("int with char, double or float")
        if bin(int(mask & _SIZES)).count("1") > 1:
            raise illegal("more than one of short, long, long long")
    if mask & _B.CHAR:
        if mask & (_B.INT | _B.DOUBLE | _B.FLOAT | _SIZES):
            raise illegal("char with a size or another type")
    if mask & _B.FLOAT:
        if mask & ~_B.FLOAT:
            raise illegal("float takes no qualifier")
    if mask & _B.DOUBLE:
        if mask & ~(_B.DOUBLE | _B.LONG):
            raise illegal("double only combines with long")
    return mask


def render(mask: BasicType) -> str:
    try:
        return RENDERINGS[mask]
    except KeyError:
        raise InternalError(
            f"validated basic type {mask!r} has no rendering",
            code=DeclErrorCodes.UNMAPPED_BASIC_TYPE,
        ) from None


def resolve(words: Sequence[str], *, plural: bool = False) -> BasicType:
    """Resolve a run of keywords to its canonical mask."""
    return canonicalize(accumulate(singularize(words, plural=plural)))


def describe(words: Sequence[str], *, plural: bool = False) -> str:
    """Resolve a run of keywords straight to its C spelling."""
    return render(resolve(words, plural=plural))


__all__ = [
    "BasicType",
    "KEYWORDS",
    "PLURAL_KEYWORDS",
    "RENDERINGS",
    "is_keyword",
    "is_basic_word",
    "singularize",
    "accumulate",
    "canonicalize",
    "render",
    "resolve",
    "describe",
]
