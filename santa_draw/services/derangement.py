from __future__ import annotations

import logging
import random
from typing import Hashable, Sequence


logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000


def _positions(original: Sequence[Hashable]) -> dict[Hashable, int]:
    return {item: i for i, item in enumerate(original)}


def _is_valid(original: Sequence, candidate: Sequence, pos: dict) -> bool:
    for i, receiver in enumerate(candidate):
        giver = original[i]
        if receiver == giver:
            return False
        if candidate[pos[receiver]] == giver:
            return False
    return True


def is_valid_assignment(original: Sequence, result: Sequence) -> bool:
    """True if result is a permutation of original with no self-gift and no mutual pair."""
    if len(original) != len(result):
        return False
    pos = _positions(original)
    if len(pos) != len(original) or set(result) != set(pos):
        return False
    return _is_valid(original, result, pos)


def generate_derangement(
    items: Sequence[Hashable],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: random.Random | None = None,
) -> list | None:
    """
    Rejection-sample a random permutation of items with no fixed points and no 2-cycles.

    Returns a new list where result[i] is the receiver for giver items[i], or
    None if no valid permutation was found within max_attempts shuffles.
    Fewer than 3 items (or duplicates) can never succeed, so those return None
    straight away.
    """
    shuffle = (rng or random).shuffle
    original = list(items)
    pos = _positions(original)

    if len(original) < 3:
        logger.debug("No valid assignment exists for %d participant(s)", len(original))
        return None
    if len(pos) != len(original):
        logger.warning("Duplicate participants given to derangement; refusing to draw")
        return None

    candidate = original[:]
    for attempt in range(1, max_attempts + 1):
        shuffle(candidate)
        if _is_valid(original, candidate, pos):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Derangement accepted after %d attempt(s); cycle lengths %s",
                    attempt,
                    cycle_lengths(original, candidate),
                )
            return candidate

    logger.warning("No valid derangement of %d participants in %d attempts", len(original), max_attempts)
    return None


def find_cycles(original: Sequence[Hashable], result: Sequence[Hashable]) -> list[list]:
    """
    Decompose the permutation original[i] -> result[i] into disjoint cycles.

    Cycles are emitted in order of their first member's position in original,
    and each cycle starts from that member.
    """
    pos = _positions(original)
    visited = [False] * len(original)
    cycles: list[list] = []

    for start in range(len(original)):
        if visited[start]:
            continue
        cycle = []
        i = start
        while not visited[i]:
            visited[i] = True
            cycle.append(original[i])
            i = pos[result[i]]
        cycles.append(cycle)

    return cycles


def cycle_lengths(original: Sequence[Hashable], result: Sequence[Hashable]) -> list[int]:
    return sorted(len(c) for c in find_cycles(original, result))
