"""Tests for candidate key rating."""

import pytest

from app.services.analysis.words import WordStats
from app.services.cryptanalysis.rater import KeyQualityRater, composite_score
from app.services.engines.vigenere import encrypt_with_key


class TestCompositeScore:
    """Test suite for the composite ranking formula."""

    def test_formula(self):
        stats = WordStats(count=3, total=4, percentage=75.0, weighted_score=2.0)
        assert composite_score(stats, 1.5) == pytest.approx(75.0 * 0.7 + 2.0 * 15 - 1.5 * 0.2)

    def test_monotone_in_each_input(self):
        base = WordStats(count=1, total=2, percentage=50.0, weighted_score=1.0)
        more_words = WordStats(count=1, total=2, percentage=60.0, weighted_score=1.0)
        heavier = WordStats(count=1, total=2, percentage=50.0, weighted_score=1.5)

        assert composite_score(more_words, 1.0) > composite_score(base, 1.0)
        assert composite_score(heavier, 1.0) > composite_score(base, 1.0)
        assert composite_score(base, 2.0) < composite_score(base, 1.0)


class TestKeyQualityRater:
    """Test suite for KeyQualityRater."""

    @pytest.fixture
    def rater(self, statistics):
        return KeyQualityRater(statistics)

    @pytest.fixture
    def ciphertext(self, english_text):
        return encrypt_with_key(english_text, "LEMON")

    def test_correct_key_scores_best(self, rater, ciphertext, dictionary):
        right = rater.rate("LEMON", ciphertext, dictionary)
        wrong = rater.rate("LEMOX", ciphertext, dictionary)

        assert right.word_stats.percentage == pytest.approx(100.0)
        assert right.composite_score > wrong.composite_score

    def test_candidate_fields(self, rater, ciphertext, dictionary, english_text):
        candidate = rater.rate("LEMON", ciphertext, dictionary)

        assert candidate.key == "LEMON"
        assert candidate.key_length == 5
        assert candidate.preview == english_text[:100]
        assert candidate.decrypted == english_text
        assert candidate.improved is None
        assert candidate.iterations is None
        assert candidate.composite_score == pytest.approx(
            composite_score(candidate.word_stats, candidate.chi_squared)
        )

    def test_full_decryption_not_in_repr(self, rater, ciphertext, dictionary, english_text):
        candidate = rater.rate("LEMON", ciphertext, dictionary)
        assert english_text not in repr(candidate)

    def test_rate_decryption_reuses_word_stats(self, rater, dictionary):
        stats = WordStats(count=1, total=1, percentage=100.0, weighted_score=1.0)
        candidate = rater.rate_decryption("KEY", "zzzz", dictionary, word_stats=stats)
        assert candidate.word_stats is stats
