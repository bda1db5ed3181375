"""
Hill-climbing refinement of a Vigenère key.

Starting from a seed key, the refiner looks for single-letter changes that
raise the dictionary recognition percentage. When the search stalls it
tries swapping adjacent key letters and finally random multi-letter
mutations whose size grows with the length of the stall.
"""

import logging
import random
import string
from dataclasses import dataclass
from typing import ClassVar

from app.services.analysis.words import Dictionary, WordRecognizer, WordStats
from app.services.engines.vigenere import VigenereCipher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementResult:
    """Outcome of one hill-climbing run."""

    final_key: str
    improved: bool
    iterations: int
    word_stats: WordStats
    decrypted: str


class _SearchState:
    """Mutable best-so-far state, local to one refine() call."""

    def __init__(self, key: str, decrypted: str, word_stats: WordStats):
        self.key = key
        self.decrypted = decrypted
        self.word_stats = word_stats
        self.iterations = 0
        self.last_improved = 0
        self.improved = False

    @property
    def score(self) -> float:
        return self.word_stats.percentage

    @property
    def stagnation(self) -> int:
        return self.iterations - self.last_improved

    def accept(self, key: str, decrypted: str, word_stats: WordStats) -> None:
        self.key = key
        self.decrypted = decrypted
        self.word_stats = word_stats
        self.improved = True
        self.last_improved = self.iterations


class KeyRefiner:
    """
    Greedy local search over keys of a fixed length.

    Cost is bounded by max_iterations * key_length * 26 decryptions.
    """

    ALPHABET: ClassVar[str] = string.ascii_uppercase

    # Iterations without improvement before adjacent swaps are tried
    SWAP_AFTER: ClassVar[int] = 5
    # Extra non-improving iterations allowed once the target is reached
    GRACE_ITERATIONS: ClassVar[int] = 10
    # Stalled iterations per additional random mutation
    MUTATION_STEP: ClassVar[int] = 3

    def __init__(
        self,
        rng: random.Random | None = None,
        recognizer: WordRecognizer | None = None,
        cipher: VigenereCipher | None = None,
    ):
        self.rng = rng or random.Random()
        self.recognizer = recognizer or WordRecognizer()
        self.cipher = cipher or VigenereCipher()

    def refine(
        self,
        seed_key: str,
        ciphertext: str,
        dictionary: Dictionary,
        target_percentage: float,
        max_iterations: int,
    ) -> RefinementResult:
        """
        Improve seed_key by hill-climbing on recognition percentage.

        Args:
            seed_key: Starting key (uppercase letters)
            ciphertext: Text to decrypt
            dictionary: Weighted dictionary used for recognition
            target_percentage: Recognition percentage at which to stop
            max_iterations: Hard cap on iterations

        Returns:
            RefinementResult with the best key found
        """
        seed_key = seed_key.upper()
        decrypted = self.cipher.decrypt(ciphertext, seed_key)
        state = _SearchState(
            seed_key,
            decrypted,
            self.recognizer.count_recognized_words(decrypted, dictionary),
        )

        while self._should_continue(state, target_percentage, max_iterations):
            state.iterations += 1
            logger.debug(
                "Refining key (iteration %d/%d), current recognition %.2f%%",
                state.iterations,
                max_iterations,
                state.score,
            )

            stagnating = state.stagnation > self.SWAP_AFTER

            found = self._try_single_letters(state, ciphertext, dictionary)
            if not found and stagnating:
                found = self._try_adjacent_swaps(state, ciphertext, dictionary)
            if not found:
                self._try_random_mutation(state, ciphertext, dictionary)

            if state.score >= target_percentage:
                break

        return RefinementResult(
            final_key=state.key,
            improved=state.improved,
            iterations=state.iterations,
            word_stats=state.word_stats,
            decrypted=state.decrypted,
        )

    def _should_continue(
        self,
        state: _SearchState,
        target_percentage: float,
        max_iterations: int,
    ) -> bool:
        if state.iterations >= max_iterations:
            return False
        return (
            state.score < target_percentage
            or state.stagnation < self.GRACE_ITERATIONS
        )

    def _try_candidate(
        self,
        state: _SearchState,
        key: str,
        ciphertext: str,
        dictionary: Dictionary,
    ) -> bool:
        decrypted = self.cipher.decrypt(ciphertext, key)
        word_stats = self.recognizer.count_recognized_words(decrypted, dictionary)

        if word_stats.percentage > state.score:
            state.accept(key, decrypted, word_stats)
            return True
        return False

    def _try_single_letters(
        self,
        state: _SearchState,
        ciphertext: str,
        dictionary: Dictionary,
    ) -> bool:
        """Try every letter at every position; stop at the first gain."""
        key = state.key

        for pos in range(len(key)):
            letters = list(self.ALPHABET)
            self.rng.shuffle(letters)

            for letter in letters:
                if letter == key[pos]:
                    continue
                candidate = key[:pos] + letter + key[pos + 1:]
                if self._try_candidate(state, candidate, ciphertext, dictionary):
                    return True

        return False

    def _try_adjacent_swaps(
        self,
        state: _SearchState,
        ciphertext: str,
        dictionary: Dictionary,
    ) -> bool:
        key = state.key

        for pos in range(len(key) - 1):
            if key[pos] == key[pos + 1]:
                continue
            candidate = key[:pos] + key[pos + 1] + key[pos] + key[pos + 2:]
            if self._try_candidate(state, candidate, ciphertext, dictionary):
                return True

        return False

    def mutation_size(self, stagnation: int, key_length: int) -> int:
        """Number of positions to mutate; grows with stagnation, up to half the key."""
        return min(stagnation // self.MUTATION_STEP + 1, key_length // 2)

    def _try_random_mutation(
        self,
        state: _SearchState,
        ciphertext: str,
        dictionary: Dictionary,
    ) -> bool:
        change_count = self.mutation_size(state.stagnation, len(state.key))
        if change_count <= 0:
            return False

        letters = list(state.key)
        for _ in range(change_count):
            pos = self.rng.randrange(len(letters))
            letters[pos] = self.rng.choice(self.ALPHABET)

        candidate = "".join(letters)
        if candidate == state.key:
            return False
        return self._try_candidate(state, candidate, ciphertext, dictionary)
