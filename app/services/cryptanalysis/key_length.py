from typing import ClassVar

from app.services.analysis.statistics import LetterStatistics


class KeyLengthEstimator:
    """
    Estimate likely Vigenère key lengths using IOC analysis.

    For each potential key length, the letters of the ciphertext are dealt
    into that many interleaved columns. With the right length every column
    is a plain Caesar cipher, so its IOC approaches that of English; the
    average column IOC is therefore highest near the true length.
    """

    TOP_LENGTHS: ClassVar[int] = 3

    def __init__(self, statistics: LetterStatistics | None = None):
        self.statistics = statistics or LetterStatistics()

    @staticmethod
    def split_sequences(text: str, key_length: int) -> list[str]:
        """
        Deal the letters of text into key_length columns.

        The i-th letter (non-letters skipped) goes to column i mod
        key_length. Letter case is kept.
        """
        sequences = [[] for _ in range(key_length)]
        position = 0

        for char in text:
            if char.isascii() and char.isalpha():
                sequences[position % key_length].append(char)
                position += 1

        return ["".join(seq) for seq in sequences]

    def average_ioc(self, text: str, key_length: int) -> float:
        """Average IOC over the columns for one key length."""
        sequences = self.split_sequences(text, key_length)
        total_ioc = sum(self.statistics.index_of_coincidence(seq) for seq in sequences)
        return total_ioc / key_length

    def rank_lengths(self, text: str, max_key_length: int) -> list[tuple[int, float]]:
        """All lengths 1..max_key_length with their average IOC, best first."""
        candidates = [
            (length, self.average_ioc(text, length))
            for length in range(1, max_key_length + 1)
        ]
        # Stable sort keeps shorter lengths first on ties
        candidates.sort(key=lambda x: x[1], reverse=True)
        return candidates

    def estimate(self, text: str, max_key_length: int) -> list[int]:
        """Return up to three most likely key lengths."""
        if max_key_length < 1:
            raise ValueError("max_key_length must be at least 1")

        ranked = self.rank_lengths(text, max_key_length)
        return [length for length, _ in ranked[: self.TOP_LENGTHS]]
