from typing import ClassVar, Sequence

from app.services.engines.vigenere import VigenereCipher


class KeyCombinator:
    """
    Expand per-position shift candidates into full candidate keys.

    The product grows multiplicatively with key length, so the running set
    of partial combinations is truncated to MAX_COMBINATIONS after each
    position is expanded. Earlier options win when truncating, which keeps
    the best-ranked shifts of the leading positions.
    """

    MAX_COMBINATIONS: ClassVar[int] = 5000

    def __init__(self, max_combinations: int = MAX_COMBINATIONS):
        self.max_combinations = max_combinations

    def combine(self, shift_options: Sequence[Sequence[int]]) -> list[str]:
        """
        Build candidate keys from ranked shifts per key position.

        Args:
            shift_options: For each key position, an ordered list of shifts

        Returns:
            Candidate keys, at most max_combinations of them
        """
        if not shift_options:
            return []

        combinations: list[tuple[int, ...]] = [
            (shift,) for shift in shift_options[0]
        ][: self.max_combinations]

        for options in shift_options[1:]:
            expanded: list[tuple[int, ...]] = []
            for combo in combinations:
                for shift in options:
                    expanded.append(combo + (shift,))
                    if len(expanded) >= self.max_combinations:
                        break
                if len(expanded) >= self.max_combinations:
                    break
            combinations = expanded

        return [VigenereCipher.shifts_to_key(combo) for combo in combinations]
