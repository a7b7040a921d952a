"""phrasedecl — English type phrases to C declarators.

Translates sentences such as ``A pointer to a function returning void.``
into compact declarator text (``void (*)()``), resolving references
between phrases by variable name.

Submodules
----------
errors
    Exception hierarchy (``StructuralError``, ``LexicalError``,
    ``IdentifierError``, ``ReferenceResolutionError``, ``CycleError``,
    ``TypeCombinationError``) and ``PD-XXXX`` error codes.

segmenter
    Parsimonious grammar splitting the input into phrases.

basic_types
    Basic-type keyword runs → canonical C type names.

classifier
    Pass 1: kinds, declared names, references; basic phrases.

references
    Continuation edges between phrases and cycle detection.

declarator
    Pass 2: the per-phrase state machine.

engine
    ``Translator`` / ``translate`` orchestrating both passes.

main
    CLI entry-point (``phrasedecl`` / ``python -m phrasedecl``).

Usage
-----
Command-line::

    phrasedecl An array of 3 pointers to data of type int.
    echo "A pointer p to a function returning void." | phrasedecl

Programmatic::

    from phrasedecl import translate

    translate("An array of 2 pointers to an array of 3 ints.")
    # ['int (*[2])[3]']
"""

from __future__ import annotations

from .engine import Translator, TranslatorConfig, translate
from .errors import DeclError

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "DeclError",
    "Translator",
    "TranslatorConfig",
    "translate",
]
