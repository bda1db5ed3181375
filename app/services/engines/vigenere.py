import string
from typing import ClassVar

from app.core.exceptions import InvalidInputError


class VigenereCipher:
    """
    Vigenère cipher primitives.

    A polyalphabetic cipher that uses a keyword to determine the shift for
    each letter. Each letter of the keyword represents a different Caesar
    shift applied in sequence; non-letters are passed through and do not
    advance the key. Letter case of the input is preserved.
    """

    ALPHABET: ClassVar[str] = string.ascii_uppercase

    def encrypt(self, plaintext: str, key: str) -> str:
        """Encrypt using the keyword."""
        return self._apply(plaintext, self._shifts(key), direction=1)

    def decrypt(self, ciphertext: str, key: str) -> str:
        """Decrypt using the keyword."""
        return self._apply(ciphertext, self._shifts(key), direction=-1)

    def decrypt_with_shift(self, text: str, shift: int) -> str:
        """Decrypt with a single constant Caesar shift."""
        return self._apply(text, [shift % 26], direction=-1)

    def validate_key(self, key: str) -> bool:
        """Validate that key is a non-empty run of A-Z letters."""
        return bool(key) and all(c in self.ALPHABET for c in key.upper())

    @staticmethod
    def shifts_to_key(shifts: list[int] | tuple[int, ...]) -> str:
        """Convert a sequence of shifts (0-25) to a key string."""
        return "".join(chr(shift + ord("A")) for shift in shifts)

    def _shifts(self, key: str) -> list[int]:
        if not self.validate_key(key):
            raise InvalidInputError(
                "Invalid key: must be a non-empty alphabetic string",
                {"key": key},
            )
        return [self.ALPHABET.index(c) for c in key.upper()]

    def _apply(self, text: str, shifts: list[int], direction: int) -> str:
        result = []
        period = len(shifts)
        key_idx = 0

        for char in text:
            if "A" <= char <= "Z":
                base = 65
            elif "a" <= char <= "z":
                base = 97
            else:
                result.append(char)
                continue

            shift = shifts[key_idx % period] * direction
            result.append(chr((ord(char) - base + shift) % 26 + base))
            key_idx += 1

        return "".join(result)


_cipher = VigenereCipher()


def decrypt_with_key(ciphertext: str, key: str) -> str:
    """Decrypt ciphertext with a known key, preserving case and non-letters."""
    if not ciphertext:
        raise InvalidInputError("Ciphertext is required")
    if not key:
        raise InvalidInputError("Key is required")
    return _cipher.decrypt(ciphertext, key)


def encrypt_with_key(plaintext: str, key: str) -> str:
    """Encrypt plaintext with a key, preserving case and non-letters."""
    return _cipher.encrypt(plaintext, key)
