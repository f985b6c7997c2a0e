"""Tests for word detection and nearest-spelling lookup."""

import pytest

from polyglot_nlu.data.utterance import tokenize
from polyglot_nlu.data.vocab import get_closest_spelling_token, is_word


class TestIsWord:

    @pytest.mark.parametrize("value", ["hello", "Hello", "don't", "e-mail", "42", "éte"])
    def test_words(self, value):
        assert is_word(value)

    @pytest.mark.parametrize("value", ["", " ", "hello world", "!", "?", "a,b", "@home", "..."])
    def test_non_words(self, value):
        assert not is_word(value)


class TestClosestSpellingToken:

    def test_single_insertion(self):
        assert get_closest_spelling_token("helllo", ["hello", "world"]) == "hello"

    def test_transposition_counts_as_one_edit(self):
        assert get_closest_spelling_token("wordl", ["hello", "world"], max_edit_distance=1) == "world"

    def test_lowercases_input(self):
        assert get_closest_spelling_token("HELLO", ["hello", "world"]) == "hello"

    def test_empty_vocab(self):
        assert get_closest_spelling_token("hello", []) is None

    def test_respects_max_edit_distance(self):
        assert get_closest_spelling_token("zzzzzz", ["hello"], max_edit_distance=2) is None

    def test_no_cap_keeps_nearest_entry(self):
        assert get_closest_spelling_token("zzzzzz", ["hello"], max_edit_distance=None) == "hello"


class TestTokenize:

    def test_splits_words_and_punctuation(self):
        assert tokenize("Hello, world!") == ["Hello", ",", "world", "!"]

    def test_keeps_contractions(self):
        assert tokenize("don't stop") == ["don't", "stop"]
