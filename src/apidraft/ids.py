"""Identifier generation for imported entities.

Every draft, header, parameter and form field produced by a parse call gets a
short random identifier. Uniqueness is guaranteed per :class:`IdFactory`, and
each parse call creates its own factory, so concurrent imports share no state.
"""

from __future__ import annotations

import secrets

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_ID_LENGTH = 9


class IdFactory:
    """Issue identifiers that are unique among those this factory has issued."""

    def __init__(self) -> None:
        self._issued: set[str] = set()

    def __call__(self) -> str:
        while True:
            candidate = "".join(secrets.choice(_ALPHABET) for _ in range(_ID_LENGTH))
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
