"""Tests for nearest-vocabulary spelling correction."""

import numpy as np

from polyglot_nlu.config import SpellCheckConfig
from polyglot_nlu.data.utterance import Utterance
from polyglot_nlu.language.spell_checker import SpellChecker


def _utterance(tokens, language_code="en", entities=None, pos=None):
    vectors = [np.full(3, i, dtype=np.float32) for i in range(len(tokens))]
    return Utterance(tokens, vectors, pos or ["NOUN"] * len(tokens), language_code, entities=entities)


VOCAB = {
    "hello": [1.0, 0.0, 0.0],
    "world": [0.0, 1.0, 0.0],
    "cat": [0.0, 0.0, 1.0],
}


class TestSpellCheckerCorrections:

    def test_corrects_close_misspellings(self):
        checker = SpellChecker(VOCAB)
        result = checker.predict(_utterance(["helllo", "wordl"]))
        assert result is not None
        assert str(result) == "hello world"

    def test_corrected_tokens_carry_vocab_vectors(self):
        checker = SpellChecker(VOCAB)
        result = checker.predict(_utterance(["helllo", "wordl"]))
        np.testing.assert_array_equal(result.tokens[0].vector, np.asarray(VOCAB["hello"], dtype=np.float32))
        np.testing.assert_array_equal(result.tokens[1].vector, np.asarray(VOCAB["world"], dtype=np.float32))

    def test_keeps_language_and_token_count(self):
        checker = SpellChecker(VOCAB)
        source = _utterance(["helllo", "big", "wordl", "!"], language_code="fr")
        result = checker.predict(source)
        assert result.language_code == "fr"
        assert len(result) == len(source)
        assert [t.value for t in result.tokens] == ["hello", "big", "world", "!"]

    def test_unaltered_tokens_keep_their_vector_and_pos(self):
        checker = SpellChecker(VOCAB)
        source = _utterance(["helllo", "zzz"], pos=["INTJ", "X"])
        result = checker.predict(source)
        assert result.tokens[1].value == "zzz"
        assert result.tokens[1].pos == "X"
        np.testing.assert_array_equal(result.tokens[1].vector, source.tokens[1].vector)

    def test_altered_token_keeps_original_pos(self):
        checker = SpellChecker(VOCAB)
        result = checker.predict(_utterance(["helllo"], pos=["INTJ"]))
        assert result.tokens[0].pos == "INTJ"


class TestSpellCheckerNoCorrection:

    def test_short_tokens_are_not_corrected(self):
        checker = SpellChecker(VOCAB)
        assert checker.predict(_utterance(["cta", "ct"])) is None

    def test_all_tokens_in_vocab(self):
        checker = SpellChecker(VOCAB)
        assert checker.predict(_utterance(["hello", "world"])) is None

    def test_vocab_lookup_is_case_insensitive(self):
        checker = SpellChecker(VOCAB)
        assert checker.predict(_utterance(["Hello", "WORLD"])) is None

    def test_short_vocab_candidate_is_rejected(self):
        checker = SpellChecker(VOCAB)
        # "catt" is long enough but its closest entry "cat" is not
        assert checker.predict(_utterance(["catt"])) is None

    def test_non_words_are_kept(self):
        checker = SpellChecker(VOCAB)
        assert checker.predict(_utterance(["hello", "!!!", ","])) is None

    def test_entity_tokens_are_kept(self):
        checker = SpellChecker(VOCAB)
        source = _utterance(["helllo"], entities=[["person"]])
        assert checker.predict(source) is None

    def test_nothing_within_edit_distance(self):
        checker = SpellChecker(VOCAB, SpellCheckConfig(max_edit_distance=1))
        assert checker.predict(_utterance(["hexxlo"])) is None

    def test_empty_vocab(self):
        checker = SpellChecker({})
        assert checker.predict(_utterance(["helllo"])) is None

    def test_empty_utterance(self):
        checker = SpellChecker(VOCAB)
        assert checker.predict(_utterance([])) is None
