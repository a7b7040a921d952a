# phrasedecl/errors.py
"""
Phrase-Declarator Error Types and Reporting Module

This module provides the error handling infrastructure for the phrase →
declarator pipeline. Every failure is fatal to the run: the engine stops
at the first error and no per-phrase output is produced.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  DeclError (base)                                                           │
│  ├── StructuralError          - Empty input, missing full stop, short text  │
│  ├── LexicalError             - Unexpected word, article, dimension, number │
│  ├── IdentifierError          - Declared name not a permitted identifier    │
│  ├── ReferenceResolutionError - Reference matches zero or several names     │
│  ├── CycleError               - Continuation edges loop back on themselves  │
│  ├── TypeCombinationError     - Illegal run of basic-type keywords          │
│  └── InternalError            - Engine bugs (should never happen)           │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error carries a code ``PD-XXXX`` where XXXX falls in the ranges:
  - 0001-0999: Structural errors
  - 1000-1999: Lexical errors
  - 2000-2999: Identifier errors
  - 3000-3999: Reference / cycle errors
  - 4000-4999: Basic-type combination errors
  - 9000-9999: Internal errors

Example Usage:
──────────────
    from phrasedecl.errors import DeclError, LexicalError, DeclErrorCodes

    try:
        translate("A pointer to an pointer.")
    except DeclError as err:
        print(err.code)           # PD-1002
        print(err.to_gcc_format())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, List, Optional, Sequence


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """
    Pipeline phase where the error occurred.
    """

    SEGMENT = "segment"        # Splitting the input into phrases
    CLASSIFY = "classify"      # Pass 1
    REFERENCE = "reference"    # Reference graph construction
    DECLARATOR = "declarator"  # Pass 2
    BASIC_TYPE = "basic-type"  # Basic-type keyword resolution
    INTERNAL = "internal"


class ErrorCode:
    """
    Structured error code ``PD-NNNN``.

    Ranges:
      - 0001-0999: Structural errors
      - 1000-1999: Lexical errors
      - 2000-2999: Identifier errors
      - 3000-3999: Reference errors
      - 4000-4999: Type-combination errors
      - 9000-9999: Internal errors
    """

    __slots__ = ("prefix", "number", "phase", "summary")

    def __init__(
        self,
        number: int,
        phase: ErrorPhase,
        summary: str,
        prefix: str = "PD",
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.summary = summary

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.phase.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


# ───────────────────────────────────────────────────────────────────────────────
# PREDEFINED ERROR CODES
# ───────────────────────────────────────────────────────────────────────────────

class DeclErrorCodes:
    """Predefined error codes for the declarator pipeline."""

    # ═══════════════════════════════════════════════════════════════════════════
    # STRUCTURAL ERRORS (0001-0999)
    # ═══════════════════════════════════════════════════════════════════════════

    EMPTY_INPUT = ErrorCode(1, ErrorPhase.SEGMENT, "no phrase in input")
    MISSING_FULL_STOP = ErrorCode(2, ErrorPhase.SEGMENT, "words after the last full stop")
    EMPTY_WORD = ErrorCode(3, ErrorPhase.SEGMENT, "full stop standing alone")
    PHRASE_TOO_SHORT = ErrorCode(4, ErrorPhase.CLASSIFY, "phrase shorter than its grammar")
    UNEXPECTED_END = ErrorCode(5, ErrorPhase.DECLARATOR, "phrase ends prematurely")
    EMPTY_BASIC_TYPE = ErrorCode(6, ErrorPhase.BASIC_TYPE, "no basic-type keyword")

    # ═══════════════════════════════════════════════════════════════════════════
    # LEXICAL ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNEXPECTED_WORD = ErrorCode(1000, ErrorPhase.DECLARATOR, "unexpected word")
    MISSING_ARTICLE = ErrorCode(1001, ErrorPhase.DECLARATOR, "article expected")
    ARTICLE_MISMATCH = ErrorCode(1002, ErrorPhase.DECLARATOR, "article does not agree")
    BAD_DIMENSION = ErrorCode(1003, ErrorPhase.DECLARATOR, "malformed array dimension")
    NUMBER_MISMATCH = ErrorCode(1004, ErrorPhase.DECLARATOR, "singular/plural disagreement")
    UNKNOWN_KEYWORD = ErrorCode(1005, ErrorPhase.BASIC_TYPE, "not a basic-type keyword")
    TRAILING_WORD = ErrorCode(1006, ErrorPhase.DECLARATOR, "words after a complete phrase")

    # ═══════════════════════════════════════════════════════════════════════════
    # IDENTIFIER ERRORS (2000-2999)
    # ═══════════════════════════════════════════════════════════════════════════

    BAD_IDENTIFIER = ErrorCode(2000, ErrorPhase.CLASSIFY, "not a permitted identifier")

    # ═══════════════════════════════════════════════════════════════════════════
    # REFERENCE ERRORS (3000-3999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNRESOLVED_REFERENCE = ErrorCode(3000, ErrorPhase.REFERENCE, "reference matches no declared name")
    AMBIGUOUS_REFERENCE = ErrorCode(3001, ErrorPhase.REFERENCE, "reference matches several declared names")
    REFERENCE_CYCLE = ErrorCode(3002, ErrorPhase.REFERENCE, "continuation cycle")
    MISPLACED_REFERENCE = ErrorCode(3003, ErrorPhase.DECLARATOR, "reference not at the end of the phrase")

    # ═══════════════════════════════════════════════════════════════════════════
    # TYPE-COMBINATION ERRORS (4000-4999)
    # ═══════════════════════════════════════════════════════════════════════════

    REPEATED_KEYWORD = ErrorCode(4000, ErrorPhase.BASIC_TYPE, "keyword repeated")
    TOO_MANY_LONGS = ErrorCode(4001, ErrorPhase.BASIC_TYPE, "more than two 'long'")
    ILLEGAL_COMBINATION = ErrorCode(4002, ErrorPhase.BASIC_TYPE, "illegal keyword combination")

    # ═══════════════════════════════════════════════════════════════════════════
    # INTERNAL ERRORS (9000-9999)
    # ═══════════════════════════════════════════════════════════════════════════

    INTERNAL_ERROR = ErrorCode(9000, ErrorPhase.INTERNAL, "internal error")
    UNMAPPED_BASIC_TYPE = ErrorCode(9001, ErrorPhase.INTERNAL, "validated basic type has no rendering")


# ═══════════════════════════════════════════════════════════════════════════════
# LOCATION
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PhraseSpan:
    """Position of an error: phrase index and word index, both 0-based.

    ``-1`` means unknown.
    """

    phrase: int = -1
    word: int = -1

    def __str__(self) -> str:
        if self.phrase < 0:
            return "<input>"
        if self.word < 0:
            return f"phrase {self.phrase + 1}"
        return f"phrase {self.phrase + 1}, word {self.word + 1}"


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGE FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ErrorMessage:
    """
    A complete error message with all context.
    """

    code: ErrorCode
    message: str
    span: PhraseSpan = field(default_factory=PhraseSpan)
    notes: List[str] = field(default_factory=list)
    hint: str = ""
    phrase_text: str = ""

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        lines = [f"{self.span}: error: {self.message} [{self.code}]"]
        if self.phrase_text:
            lines.append(f"    {self.phrase_text}")
        for note in self.notes:
            lines.append(f"note: {note}")
        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "code": self.code.code,
            "message": self.message,
            "phase": self.code.phase.value,
            "location": {"phrase": self.span.phrase, "word": self.span.word},
            "phrase": self.phrase_text,
            "notes": list(self.notes),
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class DeclError(Exception):
    """
    Base exception for all phrase-declarator errors.

    Carries a structured :class:`ErrorMessage` so the CLI can explain a
    failure while the user-facing output stays a single generic line.
    """

    default_code: ErrorCode = DeclErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[PhraseSpan] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.error_message = ErrorMessage(
            code=code or self.default_code,
            message=message,
            span=span or PhraseSpan(),
            hint=hint,
        )

    @property
    def code(self) -> ErrorCode:
        return self.error_message.code

    @property
    def span(self) -> PhraseSpan:
        return self.error_message.span

    @property
    def message(self) -> str:
        return self.error_message.message

    def locate(self, phrase: int, word: int = -1, text: str = "") -> "DeclError":
        """Attach a location unless one is already known."""
        if self.error_message.span.phrase < 0:
            self.error_message.span = PhraseSpan(phrase, word)
        if text and not self.error_message.phrase_text:
            self.error_message.phrase_text = text
        return self

    def add_note(self, note: str) -> "DeclError":
        self.error_message.notes.append(note)
        return self

    def to_gcc_format(self) -> str:
        return self.error_message.to_gcc_format()

    def to_json(self) -> Dict[str, Any]:
        return self.error_message.to_json()

    def __str__(self) -> str:
        return self.to_gcc_format()


class StructuralError(DeclError):
    """Input or phrase does not have the shape the grammar needs."""

    default_code = DeclErrorCodes.PHRASE_TOO_SHORT


class LexicalError(DeclError):
    """A word is not one of the words allowed at its position."""

    default_code = DeclErrorCodes.UNEXPECTED_WORD

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[PhraseSpan] = None,
        word: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, span=span, **kwargs)
        self.word = word


class IdentifierError(DeclError):
    """A declared or referenced name fails the identifier rule."""

    default_code = DeclErrorCodes.BAD_IDENTIFIER

    def __init__(self, name: str, span: Optional[PhraseSpan] = None, **kwargs: Any) -> None:
        super().__init__(
            f"{name!r} is not a permitted variable name",
            span=span,
            **kwargs,
        )
        self.name = name


class ReferenceResolutionError(DeclError):
    """A reference matches zero or more than one declared name."""

    default_code = DeclErrorCodes.UNRESOLVED_REFERENCE

    def __init__(
        self,
        name: str,
        matches: Sequence[int] = (),
        span: Optional[PhraseSpan] = None,
        **kwargs: Any,
    ) -> None:
        if not matches:
            message = f"no phrase declares {name!r}"
            code = DeclErrorCodes.UNRESOLVED_REFERENCE
        else:
            where = ", ".join(str(i + 1) for i in matches)
            message = f"{name!r} is declared by several phrases ({where})"
            code = DeclErrorCodes.AMBIGUOUS_REFERENCE
        super().__init__(message, code=kwargs.pop("code", code), span=span, **kwargs)
        self.name = name
        self.matches = list(matches)


class CycleError(DeclError):
    """Following continuation edges revisits a phrase."""

    default_code = DeclErrorCodes.REFERENCE_CYCLE

    def __init__(
        self,
        cycle: Sequence[str],
        span: Optional[PhraseSpan] = None,
        **kwargs: Any,
    ) -> None:
        cycle_str = " -> ".join(cycle)
        super().__init__(
            f"Circular reference detected: {cycle_str}",
            span=span,
            **kwargs,
        )
        self.cycle = list(cycle)


class TypeCombinationError(DeclError):
    """A run of basic-type keywords does not name a valid type."""

    default_code = DeclErrorCodes.ILLEGAL_COMBINATION


class InternalError(DeclError):
    """Engine invariant broken (should never happen)."""

    default_code = DeclErrorCodes.INTERNAL_ERROR


__all__ = [
    "ErrorPhase",
    "ErrorCode",
    "DeclErrorCodes",
    "PhraseSpan",
    "ErrorMessage",
    "DeclError",
    "StructuralError",
    "LexicalError",
    "IdentifierError",
    "ReferenceResolutionError",
    "CycleError",
    "TypeCombinationError",
    "InternalError",
]
