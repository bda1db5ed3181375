from dataclasses import dataclass
from typing import ClassVar

from app.services.analysis.statistics import LetterStatistics
from app.services.engines.vigenere import VigenereCipher


@dataclass(frozen=True)
class ShiftScore:
    """Score of one Caesar shift applied to a column."""

    shift: int
    chi_squared: float
    distribution_score: float
    combined_score: float


class ShiftScorer:
    """
    Rank the 26 Caesar shifts of a single key column.

    A shift is good when the decrypted column has both a low chi-squared
    against English and a high overlap with the English distribution:

        combined = chi_squared - 0.5 * distribution_score

    Lower combined scores rank first.
    """

    DISTRIBUTION_WEIGHT: ClassVar[float] = 0.5
    DEFAULT_OPTIONS: ClassVar[int] = 8
    KEY_SEARCH_OPTIONS: ClassVar[int] = 3

    def __init__(
        self,
        statistics: LetterStatistics | None = None,
        cipher: VigenereCipher | None = None,
    ):
        self.statistics = statistics or LetterStatistics()
        self.cipher = cipher or VigenereCipher()

    def score_shift(self, sequence: str, shift: int) -> ShiftScore:
        """Score a single shift for the column."""
        decrypted = self.cipher.decrypt_with_shift(sequence, shift)
        frequencies = self.statistics.frequencies(decrypted)
        chi_squared = self.statistics.chi_squared(frequencies)
        distribution = self.statistics.distribution_score(frequencies)

        return ShiftScore(
            shift=shift,
            chi_squared=chi_squared,
            distribution_score=distribution,
            combined_score=chi_squared - distribution * self.DISTRIBUTION_WEIGHT,
        )

    def score_all(self, sequence: str) -> list[ShiftScore]:
        """Score every shift, best first."""
        scores = [self.score_shift(sequence, shift) for shift in range(26)]
        scores.sort(key=lambda s: s.combined_score)
        return scores

    def best_shifts(self, sequence: str, num_options: int = DEFAULT_OPTIONS) -> list[int]:
        """Return the num_options best shifts for the column."""
        return [s.shift for s in self.score_all(sequence)[:num_options]]
