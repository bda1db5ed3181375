"""
Crack orchestrator - composes the cryptanalysis components.

Two strategies:
1. Brute force: rate a supplied list of known keys, refine the best one
2. Cryptanalysis: IOC key-length estimation, per-column shift scoring,
   candidate key expansion, rating, and refinement of the winner
"""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Sequence

from app.core.exceptions import InsufficientDataError
from app.services.analysis.statistics import LetterStatistics
from app.services.analysis.words import Dictionary
from app.services.cryptanalysis.combinator import KeyCombinator
from app.services.cryptanalysis.key_length import KeyLengthEstimator
from app.services.cryptanalysis.rater import KeyQualityRater, ScoredCandidate
from app.services.cryptanalysis.refiner import KeyRefiner, RefinementResult
from app.services.cryptanalysis.shifts import ShiftScorer

logger = logging.getLogger(__name__)


class CrackMethod(str, Enum):
    """Strategy that produced a crack result."""

    BRUTE_FORCE = "brute-force"
    BRUTE_FORCE_WITH_REFINEMENT = "brute-force-with-refinement"
    CRYPTANALYSIS = "cryptanalysis"


@dataclass(frozen=True)
class CrackTask:
    """One unit of work for the crack dispatcher."""

    ciphertext: str
    max_key_length: int = 10
    target_recognition: float = 90.0
    max_iterations: int = 35
    use_brute_force: bool = False
    known_keys: tuple[str, ...] = ()
    seed: int | None = None


@dataclass
class CrackResult:
    """Final ranked output of one crack invocation."""

    top_results: list[ScoredCandidate]
    full_decryption: str
    method: CrackMethod
    message: str | None = None

    @property
    def best(self) -> ScoredCandidate | None:
        return self.top_results[0] if self.top_results else None


class CrackOrchestrator:
    """
    Runs the brute-force or cryptanalysis strategy for one ciphertext.

    All candidates, whichever strategy produced them, are ranked with the
    same composite score so results are directly comparable.
    """

    MIN_LETTERS: ClassVar[int] = 20
    TOP_RESULTS: ClassVar[int] = 5
    NO_VIABLE_KEY: ClassVar[str] = "Could not find a viable key"

    def __init__(
        self,
        rng: random.Random | None = None,
        statistics: LetterStatistics | None = None,
    ):
        self.rng = rng or random.Random()
        self.statistics = statistics or LetterStatistics()
        self.estimator = KeyLengthEstimator(self.statistics)
        self.shift_scorer = ShiftScorer(self.statistics)
        self.combinator = KeyCombinator()
        self.rater = KeyQualityRater(self.statistics)
        self.refiner = KeyRefiner(self.rng)

    def crack(self, task: CrackTask, dictionary: Dictionary) -> CrackResult:
        """Pick a strategy for the task and run it."""
        if task.use_brute_force and task.known_keys:
            logger.info("Running brute-force crack over %d known keys", len(task.known_keys))
            return self.brute_force(
                task.ciphertext,
                task.known_keys,
                dictionary,
                task.target_recognition,
                task.max_iterations,
            )

        logger.info("Running cryptanalysis crack (max key length %d)", task.max_key_length)
        return self.cryptanalysis(
            task.ciphertext,
            task.max_key_length,
            dictionary,
            task.target_recognition,
            task.max_iterations,
        )

    def brute_force(
        self,
        ciphertext: str,
        keys: Sequence[str],
        dictionary: Dictionary,
        target_recognition: float,
        max_iterations: int,
    ) -> CrackResult:
        """
        Try each known key and refine the best one if it falls short.

        Returns:
            CrackResult with the top five keys, possibly preceded by a
            refined key when refinement improved recognition
        """
        results = [self.rater.rate(key.upper(), ciphertext, dictionary) for key in keys]

        if not results:
            return CrackResult(
                top_results=[],
                full_decryption="",
                method=CrackMethod.BRUTE_FORCE,
                message=self.NO_VIABLE_KEY,
            )

        results.sort(key=lambda c: c.composite_score, reverse=True)
        top_results = results[: self.TOP_RESULTS]
        best = top_results[0]

        if best.word_stats.percentage < target_recognition:
            refinement = self.refiner.refine(
                best.key,
                ciphertext,
                dictionary,
                target_recognition,
                max_iterations,
            )

            if refinement.improved:
                refined = self._refined_candidate(refinement, dictionary)
                logger.info(
                    "Refinement improved %s -> %s (%.2f%% -> %.2f%%)",
                    best.key,
                    refined.key,
                    best.word_stats.percentage,
                    refined.word_stats.percentage,
                )
                return CrackResult(
                    top_results=[refined, *top_results],
                    full_decryption=refinement.decrypted,
                    method=CrackMethod.BRUTE_FORCE_WITH_REFINEMENT,
                )

        return CrackResult(
            top_results=top_results,
            full_decryption=best.decrypted,
            method=CrackMethod.BRUTE_FORCE,
        )

    def cryptanalysis(
        self,
        ciphertext: str,
        max_key_length: int,
        dictionary: Dictionary,
        target_recognition: float,
        max_iterations: int,
    ) -> CrackResult:
        """
        Recover an unknown key by statistical analysis and refinement.

        Raises:
            InsufficientDataError: If the ciphertext has fewer than
                MIN_LETTERS letters
        """
        letter_count = len(self.statistics.clean(ciphertext))
        if letter_count < self.MIN_LETTERS:
            raise InsufficientDataError(letter_count, self.MIN_LETTERS)

        likely_lengths = self.estimator.estimate(ciphertext, max_key_length)
        logger.debug("Likely key lengths: %s", likely_lengths)

        best: ScoredCandidate | None = None
        for key_length in likely_lengths:
            candidate = self._best_for_length(ciphertext, key_length, dictionary)
            if candidate is None:
                continue
            if best is None or candidate.composite_score > best.composite_score:
                best = candidate

        if best is None:
            return CrackResult(
                top_results=[],
                full_decryption="",
                method=CrackMethod.CRYPTANALYSIS,
                message=self.NO_VIABLE_KEY,
            )

        logger.info(
            "Best analytical key %s (score %.2f, recognition %.2f%%)",
            best.key,
            best.composite_score,
            best.word_stats.percentage,
        )

        refinement = self.refiner.refine(
            best.key,
            ciphertext,
            dictionary,
            target_recognition,
            max_iterations,
        )

        top_results = [self._refined_candidate(refinement, dictionary)]
        if refinement.final_key != best.key:
            top_results.append(best)

        return CrackResult(
            top_results=top_results,
            full_decryption=refinement.decrypted,
            method=CrackMethod.CRYPTANALYSIS,
        )

    def _best_for_length(
        self,
        ciphertext: str,
        key_length: int,
        dictionary: Dictionary,
    ) -> ScoredCandidate | None:
        sequences = self.estimator.split_sequences(ciphertext, key_length)
        shift_options = [
            self.shift_scorer.best_shifts(seq, ShiftScorer.KEY_SEARCH_OPTIONS)
            for seq in sequences
        ]
        keys = self.combinator.combine(shift_options)
        logger.debug("Key length %d: rating %d candidate keys", key_length, len(keys))

        best: ScoredCandidate | None = None
        for key in keys:
            candidate = self.rater.rate(key, ciphertext, dictionary)
            if best is None or candidate.composite_score > best.composite_score:
                best = candidate
        return best

    def _refined_candidate(
        self,
        refinement: RefinementResult,
        dictionary: Dictionary,
    ) -> ScoredCandidate:
        candidate = self.rater.rate_decryption(
            refinement.final_key,
            refinement.decrypted,
            dictionary,
            word_stats=refinement.word_stats,
        )
        return replace(
            candidate,
            improved=refinement.improved,
            iterations=refinement.iterations,
        )
