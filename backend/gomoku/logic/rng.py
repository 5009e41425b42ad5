"""
Seedable randomness for invite codes and colour assignment.

Every random choice the server makes goes through a random.Random instance
that is passed in explicitly, so tests can pin outcomes with a seed. When no
seed is given the generator is seeded from the secrets module.
"""

from __future__ import annotations

import random
import secrets
import string
from typing import TYPE_CHECKING

from gomoku.logic.board import PlayerColor

if TYPE_CHECKING:
    from collections.abc import Sequence

INVITE_CODE_LENGTH = 6
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
_SEED_BITS = 128


def create_rng(seed: int | str | None = None) -> random.Random:
    """Create a generator from `seed`, or from a fresh cryptographic seed when None."""
    if seed is None:
        seed = secrets.randbits(_SEED_BITS)
    return random.Random(seed)  # noqa: S311


def generate_invite_code(rng: random.Random) -> str:
    """Return a short, human-typeable room code such as "K7Q2ZD"."""
    return "".join(rng.choices(INVITE_CODE_ALPHABET, k=INVITE_CODE_LENGTH))


def assign_colors(client_ids: Sequence[str], rng: random.Random) -> dict[str, PlayerColor]:
    """
    Pair exactly two identities with Black and White.

    random.sample draws a uniform permutation, so each player is Black with
    probability 1/2 regardless of join order.
    """
    if len(client_ids) != 2 or client_ids[0] == client_ids[1]:
        raise ValueError(f"Expected 2 distinct client ids, got {list(client_ids)}")
    first, second = rng.sample(list(client_ids), 2)
    return {first: PlayerColor.BLACK, second: PlayerColor.WHITE}
