from __future__ import annotations

"""Caller deck: build a shuffled deck once, then draw in rounds with no repeats.

The state is a plain value. Every transition returns a new CallerState; the
host script decides where it lives (run_caller.py keeps it in a JSON file).
"""

from dataclasses import dataclass
from typing import Sequence
import random


class InvalidDeckSizeError(ValueError):
    def __init__(self, deck_size: int, pool_size: int) -> None:
        self.deck_size = deck_size
        self.pool_size = pool_size
        super().__init__(f"Deck size ({deck_size}) must be between 1 and the pool size ({pool_size}).")


@dataclass(frozen=True)
class CallerState:
    deck: tuple[str, ...]
    rounds: tuple[tuple[str, ...], ...] = ()

    @property
    def called(self) -> tuple[str, ...]:
        return tuple(x for r in self.rounds for x in r)

    @property
    def remaining(self) -> tuple[str, ...]:
        return self.deck[len(self.called):]

    @property
    def round(self) -> int:
        return len(self.rounds)

    @property
    def exhausted(self) -> bool:
        return len(self.called) >= len(self.deck)


@dataclass(frozen=True)
class DrawResult:
    state: CallerState
    drawn: tuple[str, ...]
    done: bool  # deck exhausted after this draw


def build_deck(pool: Sequence[str], deck_size: int, rng: random.Random | None = None) -> CallerState:
    if deck_size < 1 or deck_size > len(pool):
        raise InvalidDeckSizeError(deck_size, len(pool))
    rng = rng if rng is not None else random.Random()
    shuffled = list(pool)
    rng.shuffle(shuffled)
    return CallerState(deck=tuple(shuffled[:deck_size]))


def _clamp_batch(batch_size: object) -> int:
    try:
        n = int(batch_size)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        n = 1
    return max(1, n)


def draw_next(state: CallerState, batch_size: int) -> DrawResult:
    if state.exhausted:
        return DrawResult(state=state, drawn=(), done=True)

    size = _clamp_batch(batch_size)
    start = len(state.called)
    drawn = state.deck[start:start + size]

    nxt = CallerState(deck=state.deck, rounds=state.rounds + (drawn,))
    return DrawResult(state=nxt, drawn=drawn, done=nxt.exhausted)


def undo_last(state: CallerState) -> CallerState:
    if not state.rounds:
        return state
    return CallerState(deck=state.deck, rounds=state.rounds[:-1])


def reset(state: CallerState) -> CallerState:
    """Same deck, nothing called."""
    return CallerState(deck=state.deck)


def state_to_dict(state: CallerState) -> dict:
    return {
        "deck": list(state.deck),
        "rounds": [list(r) for r in state.rounds],
        "called": list(state.called),
        "remaining": list(state.remaining),
        "round": state.round,
    }


def state_from_dict(doc: dict) -> CallerState:
    deck = tuple(str(x) for x in (doc.get("deck") or []))
    rounds = tuple(tuple(str(x) for x in r) for r in (doc.get("rounds") or []))
    state = CallerState(deck=deck, rounds=rounds)

    called = state.called
    if called != deck[:len(called)]:
        raise ValueError("Caller state is inconsistent: called items are not a prefix of the deck")
    return state
