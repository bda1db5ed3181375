import string
from collections import Counter
from types import MappingProxyType
from typing import ClassVar, Mapping

FrequencyTable = Mapping[str, float]


class LetterStatistics:
    """
    Letter statistics used throughout Vigenère cryptanalysis.

    Computes:
    - Letter frequency tables (fractions of the letter total)
    - Index of Coincidence (IOC)
    - Chi-squared divergence from English
    - Distribution alignment with English
    """

    ALPHABET: ClassVar[str] = string.ascii_uppercase

    # English letter frequencies (fractions) for chi-squared testing
    ENGLISH_FREQ: ClassVar[Mapping[str, float]] = MappingProxyType({
        "E": 0.1202, "T": 0.0910, "A": 0.0812, "O": 0.0768, "I": 0.0731,
        "N": 0.0695, "S": 0.0628, "R": 0.0602, "H": 0.0592, "D": 0.0432,
        "L": 0.0398, "U": 0.0288, "C": 0.0271, "M": 0.0261, "F": 0.0230,
        "Y": 0.0211, "W": 0.0209, "G": 0.0203, "P": 0.0182, "B": 0.0149,
        "V": 0.0111, "K": 0.0069, "X": 0.0017, "Q": 0.0011, "J": 0.0010,
        "Z": 0.0007,
    })

    def clean(self, text: str) -> str:
        """Strip everything but A-Z and uppercase the result."""
        return "".join(c for c in text.upper() if c in self.ALPHABET)

    def frequencies(self, text: str) -> FrequencyTable:
        """
        Calculate letter frequencies, case-insensitively.

        Only letters that occur are present in the table. Returns an
        empty table when the text has no letters.
        """
        filtered = self.clean(text)
        total = len(filtered)

        if total == 0:
            return MappingProxyType({})

        counter = Counter(filtered)
        return MappingProxyType({
            letter: count / total for letter, count in counter.items()
        })

    def index_of_coincidence(self, text: str) -> float:
        """
        Calculate Index of Coincidence.

        IOC measures how likely two randomly chosen letters are the same.
        - English text: ~0.0667
        - Random text: ~0.0385 (1/26)
        """
        filtered = self.clean(text)
        n = len(filtered)
        if n <= 1:
            return 0.0

        counter = Counter(filtered)
        numerator = sum(f * (f - 1) for f in counter.values())
        return numerator / (n * (n - 1))

    def chi_squared(self, frequencies: FrequencyTable) -> float:
        """
        Calculate chi-squared of a frequency table against English.

        Lower values indicate closer match to English.
        """
        chi_squared = 0.0

        for letter in self.ALPHABET:
            observed = frequencies.get(letter, 0.0)
            expected = self.ENGLISH_FREQ.get(letter, 0.0)

            if expected > 0:
                chi_squared += ((observed - expected) ** 2) / expected

        return chi_squared

    def distribution_score(self, frequencies: FrequencyTable) -> float:
        """Alignment of a frequency table with English (higher is better)."""
        return sum(
            freq * self.ENGLISH_FREQ.get(letter, 0.0) * 100
            for letter, freq in frequencies.items()
        )
