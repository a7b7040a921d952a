"""phrasedecl/engine.py – the two-pass translator.

    text ─► segment ─► classify (pass 1) ─► link references ─► declarator (pass 2)

The run is all-or-nothing: the first :class:`~phrasedecl.errors.DeclError`
aborts it and no phrase output is returned.

Usage::

    from phrasedecl.engine import Translator, TranslatorConfig

    translator = Translator(TranslatorConfig(allow_shorthand=False))
    translator.translate_text("A pointer to a datum of type int.")
    # ['int *']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from .classifier import classify_all
from .declarator import DeclaratorMachine
from .errors import DeclError
from .phrase import Phrase
from .references import ReferenceGraph
from .segmenter import segment, segment_words

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Incorrect input"


@dataclass(frozen=True)
class TranslatorConfig:
    """Tuning knobs for the translator."""
    failure_message: str = DEFAULT_FAILURE_MESSAGE
    allow_shorthand: bool = True

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.failure_message.strip():
            warnings.append("failure_message is blank")
        if "\n" in self.failure_message:
            warnings.append("failure_message spans several lines")
        return warnings


@dataclass
class Translation:
    """Result of a successful run."""
    phrases: List[Phrase]

    @property
    def lines(self) -> List[str]:
        return [p.output.read() for p in self.phrases]

    def to_json(self) -> List[dict]:
        return [
            {"index": p.index, "phrase": p.text, "declarator": p.output.read()}
            for p in self.phrases
        ]


class Translator:
    """Runs both passes over a phrase set."""

    def __init__(self, config: Optional[TranslatorConfig] = None) -> None:
        self._config = config or TranslatorConfig()
        for warning in self._config.validate():
            logger.warning("config: %s", warning)

    @property
    def config(self) -> TranslatorConfig:
        return self._config

    def run(self, phrases: Sequence[Phrase]) -> Translation:
        phrases = list(phrases)
        try:
            logger.debug("pass 1: classifying %d phrase(s)", len(phrases))
            classify_all(phrases)
            logger.debug("linking references")
            graph = ReferenceGraph.build(phrases)
            logger.debug("pass 2: declarators")
            machine = DeclaratorMachine(
                phrases, graph, allow_shorthand=self._config.allow_shorthand
            )
            machine.resolve_all()
        except DeclError as err:
            logger.info("rejected: %s", err.to_gcc_format())
            raise
        return Translation(phrases)

    def translate_phrases(self, phrases: Sequence[Phrase]) -> List[str]:
        return self.run(phrases).lines

    def translate_text(self, text: str) -> List[str]:
        return self.run(segment(text)).lines

    def translate_words(self, words: Iterable[str]) -> List[str]:
        return self.run(segment_words(words)).lines


def translate(
    source: Union[str, Iterable[str]],
    config: Optional[TranslatorConfig] = None,
) -> List[str]:
    """Translate a text, or a sequence of words, to one declarator per phrase."""
    translator = Translator(config)
    if isinstance(source, str):
        return translator.translate_text(source)
    return translator.translate_words(source)


__all__ = [
    "DEFAULT_FAILURE_MESSAGE",
    "TranslatorConfig",
    "Translation",
    "Translator",
    "translate",
]
