# tests/test_segmenter.py
"""
Tests for the segmenter: input text → phrases.
"""

import pytest
from parsimonious.exceptions import ParseError

from phrasedecl.errors import DeclErrorCodes, StructuralError
from phrasedecl.segmenter import SEGMENT_GRAMMAR, segment, segment_words


class TestGrammar:

    def test_rules_present(self):
        for rule in ("text", "phrase", "trailing", "closing_word", "open_word", "ws"):
            assert rule in SEGMENT_GRAMMAR, f"Rule {rule!r} missing"

    def test_grammar_matches_empty_input(self):
        assert SEGMENT_GRAMMAR.parse("") is not None

    def test_closing_word_rule(self):
        assert SEGMENT_GRAMMAR["closing_word"].parse("int.").text == "int."

    def test_open_word_rejects_full_stop(self):
        with pytest.raises(ParseError):
            SEGMENT_GRAMMAR["open_word"].parse("int.")


class TestSegment:

    def test_single_phrase(self):
        phrases = segment("An int.")
        assert len(phrases) == 1
        assert phrases[0].tokens == ("An", "int")
        assert phrases[0].index == 0

    def test_several_phrases(self):
        phrases = segment("An int. A pointer to a char.")
        assert [p.tokens for p in phrases] == [
            ("An", "int"),
            ("A", "pointer", "to", "a", "char"),
        ]
        assert [p.index for p in phrases] == [0, 1]

    def test_any_whitespace_separates_words(self):
        phrases = segment("  An\tint.\n\nA   char.  \n")
        assert [p.tokens for p in phrases] == [("An", "int"), ("A", "char")]

    def test_inner_full_stop_is_part_of_word(self):
        phrases = segment("An array of 3.5 ints.")
        assert phrases[0].tokens[3] == "3.5"

    def test_only_last_full_stop_is_stripped(self):
        phrases = segment("An int..")
        assert phrases[0].tokens == ("An", "int.")

    def test_phrase_text_restores_full_stop(self):
        assert segment("A  char.")[0].text == "A char."

    def test_segment_words(self):
        phrases = segment_words(["An", "int.", "A", "char."])
        assert [p.tokens for p in phrases] == [("An", "int"), ("A", "char")]


class TestSegmentErrors:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input(self, text):
        with pytest.raises(StructuralError) as info:
            segment(text)
        assert info.value.code == DeclErrorCodes.EMPTY_INPUT

    def test_no_full_stop(self):
        with pytest.raises(StructuralError) as info:
            segment("An int")
        assert info.value.code == DeclErrorCodes.MISSING_FULL_STOP

    def test_words_after_last_full_stop(self):
        with pytest.raises(StructuralError) as info:
            segment("An int. A char")
        assert info.value.code == DeclErrorCodes.MISSING_FULL_STOP
        assert info.value.span.phrase == 1

    def test_lone_full_stop(self):
        with pytest.raises(StructuralError) as info:
            segment("An int .")
        assert info.value.code == DeclErrorCodes.EMPTY_WORD

    def test_phrase_of_only_a_full_stop(self):
        with pytest.raises(StructuralError):
            segment("An int. .")
