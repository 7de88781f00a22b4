"""Entity obfuscation for email addresses."""

from __future__ import annotations

import random
from typing import Optional

_SYSTEM_RANDOM = random.SystemRandom()

# Characters that are never left bare, so the output is always safe HTML
_MARKUP_CHARS = frozenset("&<>\"'")


def obfuscate(value: str, rng: Optional[random.Random] = None) -> str:
    """Obfuscate a string to keep naive scrapers from reading it.

    Each character is randomly kept, or written as a decimal or hexadecimal
    character reference, so the rendered text is unchanged. Markup
    characters are always written as references. The first character above
    code point 128 is returned on its own and the rest of the string is
    discarded.
    """

    rng = rng or _SYSTEM_RANDOM
    safe = []
    for letter in value:
        code = ord(letter)
        if code > 128:
            return letter
        choice = rng.randint(1, 3)
        if choice == 1:
            safe.append(f"&#{code};")
        elif choice == 2:
            safe.append(f"&#x{code:x};")
        elif letter in _MARKUP_CHARS:
            safe.append(f"&#{code};")
        else:
            safe.append(letter)
    return "".join(safe)


def obfuscate_email(address: str, rng: Optional[random.Random] = None) -> str:
    """Obfuscate an email address, always hiding the ``@``."""

    return obfuscate(address, rng).replace("@", "&#64;")
