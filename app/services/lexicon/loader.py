import logging
from pathlib import Path
from types import MappingProxyType
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.exceptions import LexiconLoadError
from app.services.analysis.words import Dictionary

logger = logging.getLogger(__name__)


class WordListFile(BaseModel):
    """On-disk word list, ordered from most to least frequent."""

    model_config = ConfigDict(populate_by_name=True)

    common_words: list[str] = Field(alias="commonWords")


class KnownKeysFile(BaseModel):
    """On-disk list of keys to try in brute-force mode."""

    keys: list[str]


class LexiconLoader:
    """
    Loads the weighted dictionary and the known-key list.

    Word weights grow with word length, and the most frequent words get a
    fixed bonus:

        weight = 1.0 + 0.3 * (len - 2)   (for words longer than 2)
               + 0.8                     (for the first 500 words)
    """

    LENGTH_BONUS: ClassVar[float] = 0.3
    RANK_BONUS: ClassVar[float] = 0.8
    RANK_CUTOFF: ClassVar[int] = 500

    def build_dictionary(self, words: list[str]) -> Dictionary:
        """
        Build a read-only weighted dictionary from a ranked word list.

        A word listed more than once takes the weight of its last entry.
        """
        dictionary: dict[str, float] = {}

        for index, raw in enumerate(words):
            word = raw.strip().lower()
            if not (word.isascii() and word.isalpha()):
                continue

            weight = 1.0
            if len(word) > 2:
                weight += (len(word) - 2) * self.LENGTH_BONUS
            if index < self.RANK_CUTOFF:
                weight += self.RANK_BONUS
            dictionary[word] = weight

        return MappingProxyType(dictionary)

    def load_dictionary(self, path: Path | str) -> Dictionary:
        """Load and weight the dictionary file."""
        word_list = self._read(path, WordListFile)
        dictionary = self.build_dictionary(word_list.common_words)
        logger.info("Loaded dictionary with %d words from %s", len(dictionary), path)
        return dictionary

    def load_known_keys(self, path: Path | str) -> tuple[str, ...]:
        """Load the known-key list, uppercased, keeping only alphabetic keys."""
        keys_file = self._read(path, KnownKeysFile)
        keys = tuple(
            dict.fromkeys(
                key.strip().upper()
                for key in keys_file.keys
                if key.strip().isalpha() and key.strip().isascii()
            )
        )
        logger.info("Loaded %d known keys from %s", len(keys), path)
        return keys

    def _read(self, path: Path | str, model: type[BaseModel]):
        path = Path(path)
        try:
            return model.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise LexiconLoadError(str(path), "file not found")
        except ValidationError as e:
            raise LexiconLoadError(str(path), str(e))
