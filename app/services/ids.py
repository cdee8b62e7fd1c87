"""Identifier generator

ULID (python-ulid): 48 bits de timestamp (ms) + 80 bits aléatoires,
26 caractères base32 Crockford. L'ordre lexicographique suit l'ordre de
création.
"""

from ulid import ULID

ULID_LENGTH = 26


def new_id() -> str:
    return str(ULID())
