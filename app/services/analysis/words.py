import re
from dataclasses import dataclass
from typing import ClassVar, Mapping

Dictionary = Mapping[str, float]


@dataclass(frozen=True)
class WordStats:
    """Dictionary recognition statistics for one decrypted text."""

    count: int
    total: int
    percentage: float
    weighted_score: float


class WordRecognizer:
    """
    Scores text against a weighted dictionary.

    Tokens are maximal runs of letters. Every token counts towards the
    total, but only tokens of at least MIN_WORD_LENGTH letters are looked
    up, so single letters always count as unrecognized.
    """

    MIN_WORD_LENGTH: ClassVar[int] = 2
    _TOKEN_RE: ClassVar[re.Pattern[str]] = re.compile(r"[a-z]+")

    def tokenize(self, text: str) -> list[str]:
        """Split text into lowercase letter runs."""
        return self._TOKEN_RE.findall(text.lower())

    def count_recognized_words(self, text: str, dictionary: Dictionary) -> WordStats:
        """
        Count dictionary words in text.

        Args:
            text: Candidate plaintext
            dictionary: Lowercase word -> positive weight

        Returns:
            WordStats with recognition percentage and average weight
        """
        words = self.tokenize(text)
        total = len(words)

        if total == 0:
            return WordStats(count=0, total=0, percentage=0.0, weighted_score=0.0)

        recognized = 0
        total_weight = 0.0
        for word in words:
            if len(word) < self.MIN_WORD_LENGTH:
                continue
            weight = dictionary.get(word)
            if weight:
                recognized += 1
                total_weight += weight

        return WordStats(
            count=recognized,
            total=total,
            percentage=recognized / total * 100,
            weighted_score=total_weight / total,
        )


def count_recognized_words(text: str, dictionary: Dictionary) -> WordStats:
    """Module-level shortcut used by the direct decrypt path."""
    return WordRecognizer().count_recognized_words(text, dictionary)
