# tests/conftest.py
"""
Shared fixtures and helpers for the phrasedecl test-suite.
"""

import logging
from typing import List

import pytest

from phrasedecl.classifier import classify_all
from phrasedecl.engine import Translator, TranslatorConfig
from phrasedecl.phrase import Phrase
from phrasedecl.references import ReferenceGraph
from phrasedecl.segmenter import segment


# ═══════════════════════════════════════════════════════════════════
#  Sample inputs
# ═══════════════════════════════════════════════════════════════════

POINTER_TO_INT = "A pointer to an int."
ARRAY_OF_INTS = "An array of 3 ints."
POINTER_TO_FUNCTION = "A pointer to a function returning void."
ARRAY_OF_POINTERS_TO_ARRAYS = "An array of 2 pointers to an array of 3 ints."
ARTICLE_MISMATCH = "A pointer to an pointer."

CROSS_REFERENCE = (
    "An array of 2 data of type the type of X. "
    "A pointer X to an int."
)

FUNCTION_POINTER_CHAIN = (
    "A pointer fp to a datum of type the type of f. "
    "A function f returning a pointer to a datum of type the type of c. "
    "A char c."
)


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════

def classified(text: str) -> List[Phrase]:
    """Segment and run pass 1."""
    phrases = segment(text)
    classify_all(phrases)
    return phrases


def linked(text: str) -> List[Phrase]:
    """Segment, run pass 1 and link references."""
    phrases = classified(text)
    ReferenceGraph.build(phrases)
    return phrases


def pointer_cycle(length: int) -> List[str]:
    """``length`` pointer phrases, each referring to the next, the last to the first."""
    return [
        f"A pointer v{i} to a datum of type the type of v{(i + 1) % length}."
        for i in range(length)
    ]


# ═══════════════════════════════════════════════════════════════════
#  Fixtures
# ═══════════════════════════════════════════════════════════════════

@pytest.fixture
def translator():
    return Translator()


@pytest.fixture
def strict_translator():
    return Translator(TranslatorConfig(allow_shorthand=False))


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop the stderr handler a CLI test installed on the package logger."""
    yield
    logger = logging.getLogger("phrasedecl")
    for handler in [h for h in logger.handlers if getattr(h, "_phrasedecl_cli", False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
