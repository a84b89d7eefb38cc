from __future__ import annotations

import hashlib
from random import Random
from typing import Sequence, TypeVar

T = TypeVar("T")


def derive_seed(base_seed: int, *, turn: int, stream: str, purpose: str) -> int:
    payload = f"{base_seed}|{turn}|{stream}|{purpose}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8).digest()
    return int.from_bytes(digest, "big")


def pick_random(items: Sequence[T], rng: Random | None = None) -> T | None:
    if not items:
        return None
    rng = rng or Random()
    return items[rng.randrange(len(items))]


def weighted_pick(weighted: Sequence[tuple[T, float]], rng: Random | None = None) -> T | None:
    """Pick an item with probability proportional to its weight.

    Falls back to a uniform pick when the total weight is not positive.
    """
    if not weighted:
        return None
    if len(weighted) == 1:
        return weighted[0][0]
    rng = rng or Random()
    total = sum(max(0.0, float(w)) for _, w in weighted)
    if total <= 0:
        return weighted[rng.randrange(len(weighted))][0]
    r = rng.random() * total
    for item, weight in weighted:
        weight = max(0.0, float(weight))
        if r < weight:
            return item
        r -= weight
    return weighted[-1][0]
