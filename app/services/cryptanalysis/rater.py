from dataclasses import dataclass, field
from typing import ClassVar

from app.services.analysis.statistics import LetterStatistics
from app.services.analysis.words import Dictionary, WordRecognizer, WordStats
from app.services.engines.vigenere import VigenereCipher

# Composite score weights, shared by every strategy so that scores stay
# comparable across brute-force and cryptanalysis results.
PERCENTAGE_WEIGHT = 0.7
WEIGHTED_SCORE_WEIGHT = 15.0
CHI_SQUARED_WEIGHT = 0.2


def composite_score(word_stats: WordStats, chi_squared: float) -> float:
    """Universal ranking formula for candidate keys (higher is better)."""
    return (
        word_stats.percentage * PERCENTAGE_WEIGHT
        + word_stats.weighted_score * WEIGHTED_SCORE_WEIGHT
        - chi_squared * CHI_SQUARED_WEIGHT
    )


@dataclass
class ScoredCandidate:
    """A candidate key with its decryption quality."""

    key: str
    preview: str
    word_stats: WordStats
    chi_squared: float
    composite_score: float

    # Set only on candidates produced by refinement
    improved: bool | None = None
    iterations: int | None = None

    # Full decryption, kept out of repr and equality
    decrypted: str = field(default="", repr=False, compare=False)

    @property
    def key_length(self) -> int:
        return len(self.key)


class KeyQualityRater:
    """
    Rate a candidate key by decrypting and scoring the result.

    Combines dictionary recognition with letter-frequency fit using
    composite_score().
    """

    PREVIEW_LENGTH: ClassVar[int] = 100

    def __init__(
        self,
        statistics: LetterStatistics | None = None,
        recognizer: WordRecognizer | None = None,
        cipher: VigenereCipher | None = None,
    ):
        self.statistics = statistics or LetterStatistics()
        self.recognizer = recognizer or WordRecognizer()
        self.cipher = cipher or VigenereCipher()

    def rate(self, key: str, ciphertext: str, dictionary: Dictionary) -> ScoredCandidate:
        """Decrypt with key and compute the composite score."""
        decrypted = self.cipher.decrypt(ciphertext, key)
        return self.rate_decryption(key, decrypted, dictionary)

    def rate_decryption(
        self,
        key: str,
        decrypted: str,
        dictionary: Dictionary,
        word_stats: WordStats | None = None,
    ) -> ScoredCandidate:
        """Score an already decrypted text for the given key."""
        if word_stats is None:
            word_stats = self.recognizer.count_recognized_words(decrypted, dictionary)

        frequencies = self.statistics.frequencies(decrypted)
        chi_squared = self.statistics.chi_squared(frequencies)

        return ScoredCandidate(
            key=key,
            preview=decrypted[: self.PREVIEW_LENGTH],
            word_stats=word_stats,
            chi_squared=chi_squared,
            composite_score=composite_score(word_stats, chi_squared),
            decrypted=decrypted,
        )
