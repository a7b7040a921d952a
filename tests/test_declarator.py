# tests/test_declarator.py
"""
Tests for pass 2: the declarator state machine.
"""

import pytest

from phrasedecl.declarator import DeclaratorMachine, ResolutionContext
from phrasedecl.errors import (
    DeclErrorCodes,
    InternalError,
    LexicalError,
    StructuralError,
)
from phrasedecl.phrase import PhraseKind, Stage
from phrasedecl.references import ReferenceGraph
from phrasedecl.segmenter import segment
from tests.conftest import classified


def resolve(text, allow_shorthand=True):
    phrases = classified(text)
    graph = ReferenceGraph.build(phrases)
    machine = DeclaratorMachine(phrases, graph, allow_shorthand=allow_shorthand)
    return machine.resolve_all()


class TestContext:

    def test_advance_stops_at_last_word(self):
        phrase = segment("A pointer to a.")[0]
        ctx = ResolutionContext(origin=phrase, phrase=phrase, kind=PhraseKind.POINTER, cursor=3)
        with pytest.raises(StructuralError) as info:
            ctx.advance()
        assert info.value.code == DeclErrorCodes.UNEXPECTED_END

    def test_expect(self):
        phrase = segment("A pointer of void.")[0]
        ctx = ResolutionContext(origin=phrase, phrase=phrase, kind=PhraseKind.POINTER, cursor=2)
        with pytest.raises(LexicalError) as info:
            ctx.expect("to")
        assert info.value.word == "of"

    def test_output_goes_to_origin(self):
        origin, other = segment("An int. A char.")
        ctx = ResolutionContext(origin=origin, phrase=origin, kind=PhraseKind.BASIC)
        ctx.follow(other)
        ctx.prepend("*")
        ctx.append("[2]")
        assert origin.output.read() == "*[2]"
        assert other.output.read() == ""
        assert ctx.cursor == 1


class TestShorthand:

    @pytest.mark.parametrize("text,expected", [
        ("A pointer to an int.", "int *"),
        ("An array of 3 ints.", "int [3]"),
        ("A pointer to a function returning void.", "void (*)()"),
        ("A pointer to an array of 2 ints.", "int (*)[2]"),
        ("An array of 2 pointers to an int.", "int *[2]"),
        ("An array of 2 pointers to an array of 3 ints.", "int (*[2])[3]"),
        ("A function returning a char.", "char ()"),
        ("An array of 1 unsigned long.", "unsigned long [1]"),
        ("An array arr of 3 unsigned long longs.", "unsigned long long arr[3]"),
    ])
    def test_translation(self, text, expected):
        assert resolve(text) == [expected]


class TestLongForm:

    @pytest.mark.parametrize("text,expected", [
        ("A pointer to a datum of type int.", "int *"),
        ("An array of 3 data of type int.", "int [3]"),
        ("An array of 1 datum of type char.", "char [1]"),
        ("An array of 3 pointers to data of type char.", "char *[3]"),
        ("A pointer p to a datum of type int.", "int *p"),
        ("A function f returning void.", "void f()"),
        ("A pointer to void.", "void *"),
        ("A pointer to a pointer to a datum of type int.", "int **"),
        ("An array of 2 arrays of 3 data of type int.", "int [2][3]"),
        ("A function returning a pointer to a datum of type char.", "char *()"),
        ("An array of 2 pointers to pointers to data of type int.", "int **[2]"),
        ("A pointer to an array of 4 data of type long double.", "long double (*)[4]"),
    ])
    def test_translation(self, text, expected):
        assert resolve(text, allow_shorthand=False) == [expected]

    def test_shorthand_refused_in_strict_mode(self):
        with pytest.raises(LexicalError) as info:
            resolve("A pointer to an int.", allow_shorthand=False)
        assert info.value.code == DeclErrorCodes.UNEXPECTED_WORD
        assert info.value.word == "int"


class TestReferences:

    def test_reference_to_basic(self):
        assert resolve("A pointer to a datum of type the type of n. An unsigned int n.") == [
            "unsigned *",
            "unsigned n",
        ]

    def test_reference_to_pointer(self):
        assert resolve("An array of 2 data of type the type of X. A pointer X to an int.") == [
            "int *[2]",
            "int *X",
        ]

    def test_pointer_to_referenced_array(self):
        assert resolve(
            "A pointer to a datum of type the type of arr. An array arr of 3 chars."
        ) == ["char (*)[3]", "char arr[3]"]

    def test_pointer_to_referenced_function(self):
        assert resolve(
            "A pointer to a datum of type the type of F. A function F returning void."
        ) == ["void (*)()", "void F()"]

    def test_chain_of_references(self):
        assert resolve(
            "A pointer fp to a datum of type the type of f. "
            "A function f returning a pointer to a datum of type the type of c. "
            "A char c."
        ) == ["char *(*fp)()", "char *f()", "char c"]

    def test_trailing_reference_after_basic(self):
        assert resolve("A pointer to an int X. An int X.") == ["int *", "int X"]

    def test_trailing_reference_after_void(self):
        assert resolve("A pointer to void X. An int X.") == ["void *", "int X"]

    def test_misplaced_reference(self):
        with pytest.raises(LexicalError) as info:
            resolve("A pointer to a datum of type the type of X int. An int X.")
        assert info.value.code == DeclErrorCodes.MISPLACED_REFERENCE


class TestBareReference:

    @pytest.mark.parametrize("text,expected", [
        ("An array of 2 X. A pointer X to an int.", ["int *[2]", "int *X"]),
        ("An array of 1 n. An int n.", ["int [1]", "int n"]),
        ("A pointer to X. An array X of 3 chars.", ["char (*)[3]", "char X[3]"]),
        ("A pointer to F. A function F returning void.", ["void (*)()", "void F()"]),
        ("A pointer to a T. An int T.", ["int *", "int T"]),
        ("An array of 2 pointers to X. A char X.", ["char *[2]", "char X"]),
        ("A function returning X. A pointer X to a char.", ["char *()", "char *X"]),
        ("A pointer p to q. A pointer q to r. A long r.", ["long **p", "long *q", "long r"]),
    ])
    def test_reference_as_element_type(self, text, expected):
        assert resolve(text) == expected

    def test_refused_in_strict_mode(self):
        with pytest.raises(LexicalError) as info:
            resolve("An array of 2 X. A pointer X to an int.", allow_shorthand=False)
        assert info.value.code == DeclErrorCodes.UNEXPECTED_WORD

    def test_must_be_last_word(self):
        with pytest.raises(LexicalError):
            resolve("An array of 2 X int. An int X.")


class TestErrors:

    def test_article_mismatch(self):
        with pytest.raises(LexicalError) as info:
            resolve("A pointer to an pointer.")
        assert info.value.code == DeclErrorCodes.ARTICLE_MISMATCH
        assert info.value.code == "PD-1002"
        assert info.value.span.word == 3
        assert info.value.error_message.hint == "write 'a pointer'"

    def test_missing_article(self):
        with pytest.raises(LexicalError) as info:
            resolve("A function returning pointers to ints.")
        assert info.value.code == DeclErrorCodes.MISSING_ARTICLE

    @pytest.mark.parametrize("size", ["0", "03", "-1", "three", "2.5"])
    def test_bad_dimension(self, size):
        with pytest.raises(LexicalError) as info:
            resolve(f"An array of {size} ints.")
        assert info.value.code == DeclErrorCodes.BAD_DIMENSION

    @pytest.mark.parametrize("text", [
        "An array of 1 ints.",
        "An array of 2 int.",
        "An array of 2 datum of type int.",
        "An array of 1 data of type int.",
        "An array of 1 pointers to void.",
        "An array of 3 array of 2 ints.",
    ])
    def test_number_mismatch(self, text):
        with pytest.raises(LexicalError) as info:
            resolve(text)
        assert info.value.code == DeclErrorCodes.NUMBER_MISMATCH

    def test_function_returning_array(self):
        with pytest.raises(LexicalError) as info:
            resolve("A function returning an array of 2 ints.")
        assert info.value.code == DeclErrorCodes.UNEXPECTED_WORD

    def test_premature_end(self):
        with pytest.raises(StructuralError) as info:
            resolve("A pointer to a.")
        assert info.value.code == DeclErrorCodes.UNEXPECTED_END

    def test_words_after_void(self):
        with pytest.raises(LexicalError) as info:
            resolve("A pointer to void 3.")
        assert info.value.code == DeclErrorCodes.TRAILING_WORD

    def test_wrong_keyword(self):
        with pytest.raises(LexicalError) as info:
            resolve("A pointer p of void.")
        assert info.value.code == DeclErrorCodes.UNEXPECTED_WORD

    def test_error_marks_origin_phrase(self):
        phrases = classified("A pointer to an pointer.")
        machine = DeclaratorMachine(phrases, ReferenceGraph.build(phrases))
        with pytest.raises(LexicalError):
            machine.resolve(phrases[0])
        assert phrases[0].stage is Stage.ERROR
        with pytest.raises(InternalError):
            machine.resolve(phrases[0])

    def test_finished_phrase_is_not_resolved_again(self):
        phrases = classified("A pointer to an int.")
        machine = DeclaratorMachine(phrases, ReferenceGraph.build(phrases))
        assert machine.resolve(phrases[0]) == "int *"
        assert machine.resolve(phrases[0]) == "int *"
