"""Shared fixtures for the cryptanalysis tests."""

import pytest

from app.services.analysis.statistics import LetterStatistics
from app.services.analysis.words import WordRecognizer
from app.services.lexicon.loader import LexiconLoader

# English prose without single-letter words, so every token counts
ENGLISH_TEXT = (
    "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG. WE WILL ATTACK AT DAWN FROM "
    "THE NORTH SIDE OF THE CASTLE WHILE THE ENEMY ARMY SLEEPS NEAR THE OLD "
    "BRIDGE BY THE RIVER. SEND THE SECRET MESSAGE TO THE CAPTAIN BEFORE THE SUN "
    "GOES DOWN AND TELL HIM TO HOLD HIS POSITION UNTIL THE SIGNAL COMES FROM "
    "THE HILL. THE SOLDIERS MUST KEEP THEIR HORSES READY AND THEIR WEAPONS "
    "CLEAN, FOR THE ROAD TO THE CITY IS LONG AND THE NIGHT WILL BE COLD. WHEN "
    "THE MOON RISES OVER THE FOREST WE SHALL MOVE QUIETLY ACROSS THE FIELD AND "
    "WAIT FOR THE GATE TO OPEN. THE KING HAS PROMISED GOLD AND LAND TO EVERY "
    "MAN WHO RETURNS, BUT ONLY IF THE PLAN IS KEPT HIDDEN FROM THE SPIES IN "
    "THE TOWN. REMEMBER THAT SILENCE IS OUR BEST FRIEND AND THAT PATIENCE WILL "
    "WIN THE WAR."
)

EXTRA_WORDS = [
    "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
    "attack", "dawn", "lemon", "hello", "world", "retreat", "treasure",
]


@pytest.fixture
def statistics():
    return LetterStatistics()


@pytest.fixture
def english_text():
    return ENGLISH_TEXT


@pytest.fixture
def dictionary():
    """Weighted dictionary covering every word of ENGLISH_TEXT."""
    words = EXTRA_WORDS + WordRecognizer().tokenize(ENGLISH_TEXT)
    return LexiconLoader().build_dictionary(words)
