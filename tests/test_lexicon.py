"""Tests for dictionary and known-key loading."""

import json

import pytest

from app.core.config import DATA_DIR
from app.core.exceptions import LexiconLoadError
from app.services.lexicon.loader import LexiconLoader


class TestLexiconLoader:
    """Test suite for LexiconLoader."""

    @pytest.fixture
    def loader(self):
        return LexiconLoader()

    def test_word_weights(self, loader):
        dictionary = loader.build_dictionary(["the", "of", "attack"])

        assert dictionary["the"] == pytest.approx(1.0 + 0.3 + 0.8)
        assert dictionary["of"] == pytest.approx(1.0 + 0.8)
        assert dictionary["attack"] == pytest.approx(1.0 + 1.2 + 0.8)

    def test_rank_bonus_only_for_first_five_hundred(self, loader):
        words = ["filler"] * 500 + ["late"]
        dictionary = loader.build_dictionary(words)

        assert dictionary["filler"] == pytest.approx(1.0 + 1.2 + 0.8)
        assert dictionary["late"] == pytest.approx(1.0 + 0.6)

    def test_words_are_normalized_and_filtered(self, loader):
        dictionary = loader.build_dictionary([" The ", "don't", "café", "x2", "THE"])
        assert dict(dictionary) == {"the": pytest.approx(2.1)}

    def test_duplicate_word_takes_last_weight(self, loader):
        words = ["late"] + ["filler"] * 500 + ["late"]
        dictionary = loader.build_dictionary(words)

        assert dictionary["late"] == pytest.approx(1.0 + 0.6)

    def test_dictionary_is_read_only(self, loader):
        dictionary = loader.build_dictionary(["the"])
        with pytest.raises(TypeError):
            dictionary["new"] = 1.0  # type: ignore[index]

    def test_load_dictionary(self, loader, tmp_path):
        path = tmp_path / "words.json"
        path.write_text(json.dumps({"commonWords": ["the", "Attack", "dawn"]}))

        dictionary = loader.load_dictionary(path)
        assert set(dictionary) == {"the", "attack", "dawn"}

    def test_load_known_keys(self, loader, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"keys": ["lemon", " key ", "LEMON", "bad key", "k3y"]}))

        assert loader.load_known_keys(path) == ("LEMON", "KEY")

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(LexiconLoadError, match="file not found"):
            loader.load_dictionary(tmp_path / "missing.json")

    @pytest.mark.parametrize("content", ["not json", '{"words": []}', '{"commonWords": 5}'])
    def test_malformed_file(self, loader, tmp_path, content):
        path = tmp_path / "words.json"
        path.write_text(content)

        with pytest.raises(LexiconLoadError):
            loader.load_dictionary(path)

    def test_bundled_files(self, loader):
        dictionary = loader.load_dictionary(DATA_DIR / "words.json")
        keys = loader.load_known_keys(DATA_DIR / "known_keys.json")

        assert len(dictionary) > LexiconLoader.RANK_CUTOFF
        assert {"the", "attack", "dawn", "quick", "brown", "fox"} <= set(dictionary)
        assert "LEMON" in keys
        assert all(key.isalpha() and key.isupper() for key in keys)
