from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import datetime

from .derangement import DEFAULT_MAX_ATTEMPTS, cycle_lengths, generate_derangement


MAX_NAME_LENGTH = 64


class SantaError(RuntimeError):
    status_code = 400


class InvalidParticipant(SantaError):
    pass


class ParticipantNotFound(SantaError):
    status_code = 404


class DrawLocked(SantaError):
    pass


class DrawNotRun(SantaError):
    pass


class InsufficientParticipants(SantaError):
    pass


class DrawFailed(SantaError):
    status_code = 500


@dataclass(frozen=True)
class DrawState:
    participants: tuple[str, ...] = ()
    # giver name -> receiver name
    results: dict[str, str] = field(default_factory=dict)
    is_drawn: bool = False
    drawn_at: datetime | None = None


def register_participant(state: DrawState, name: str | None) -> DrawState:
    name = (name or "").strip()
    if not name:
        raise InvalidParticipant("Name is required.")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidParticipant(f"Name must be at most {MAX_NAME_LENGTH} characters.")
    if state.is_drawn:
        raise DrawLocked("Registration is closed because the draw has already been run.")
    if name in state.participants:
        raise InvalidParticipant("That name is already registered.")
    return replace(state, participants=state.participants + (name,))


def remove_participant(state: DrawState, name: str) -> DrawState:
    if state.is_drawn:
        raise DrawLocked("Participants cannot be removed after the draw.")
    if name not in state.participants:
        raise ParticipantNotFound("No such participant.")
    return replace(state, participants=tuple(p for p in state.participants if p != name))


def run_draw(
    state: DrawState,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: random.Random | None = None,
) -> DrawState:
    """
    Draw a fresh assignment for every participant, replacing any previous one.

    Raises DrawFailed when no assignment satisfies the constraints; the given
    state is left as it was so the caller can keep its previous draw.
    """
    givers = list(state.participants)
    if len(givers) < 2:
        raise InsufficientParticipants("Need at least 2 participants to run the draw.")

    receivers = generate_derangement(givers, max_attempts=max_attempts, rng=rng)
    if receivers is None:
        if len(givers) == 2:
            raise DrawFailed("Two participants would just swap gifts; at least 3 are needed.")
        raise DrawFailed("No valid assignment was found. Please try again.")

    return replace(
        state,
        results=dict(zip(givers, receivers)),
        is_drawn=True,
        drawn_at=datetime.utcnow(),
    )


def clear_draw(state: DrawState) -> DrawState:
    return replace(state, results={}, is_drawn=False, drawn_at=None)


def reset_state() -> DrawState:
    return DrawState()


def result_for(state: DrawState, name: str) -> str:
    if not state.is_drawn:
        raise DrawNotRun("The draw has not been run yet.")
    if name not in state.participants:
        raise ParticipantNotFound("No such participant.")
    return state.results[name]


def draw_cycle_lengths(state: DrawState) -> list[int]:
    if not state.is_drawn:
        raise DrawNotRun("The draw has not been run yet.")
    givers = list(state.participants)
    return cycle_lengths(givers, [state.results[g] for g in givers])
