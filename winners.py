from __future__ import annotations

"""Blackout completion over a draw history.

A card is complete once every non-free label on it has been called. Rounds are
cumulative: the completion round is the 1-based index of the first round after
which the called set covers the card.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence
import re

from bingo import FREE, Card, Pack
from caller import CallerState


_DAY_HEADER_RES = (
    re.compile(r"^day\s*(\d+)\s*:?$", re.IGNORECASE),
    # A bare number is a header only with its colon, so "12" stays a call
    re.compile(r"^(\d+)\s*:$"),
)
_ESCAPE = "\\"


@dataclass(frozen=True)
class DrawDay:
    day: int
    calls: tuple[str, ...]


@dataclass(frozen=True)
class WinnerRow:
    card_id: str
    completion_round: int | None
    required_count: int


def normalize_label(s: str | None) -> str:
    return (s or "").strip()


def required_labels(card: Card) -> set[str]:
    out: set[str] = set()
    for row in card.grid:
        for cell in row:
            if cell is FREE:
                continue
            v = normalize_label(cell)
            if v:
                out.add(v)
    return out


def compute_completion(card: Card, rounds: Iterable[Iterable[str | None]]) -> int | None:
    required = required_labels(card)
    called: set[str] = set()

    for idx1, calls in enumerate(rounds, start=1):
        for raw in calls or ():
            v = normalize_label(raw)
            if v:
                called.add(v)
        if required <= called:
            return idx1

    return None


def compute_expected_winners(pack: Pack, rounds: Sequence[Sequence[str | None]]) -> list[WinnerRow]:
    rows = [
        WinnerRow(
            card_id=card.id,
            completion_round=compute_completion(card, rounds),
            required_count=len(required_labels(card)),
        )
        for card in pack.cards
    ]
    # Earliest completion first, incomplete cards last, then by card id
    rows.sort(key=lambda r: (r.completion_round is None, r.completion_round or 0, r.card_id))
    return rows


def first_completers(rows: Iterable[WinnerRow]) -> list[WinnerRow]:
    """All cards that share the earliest completion round (ties are kept)."""
    done = [r for r in rows if r.completion_round is not None]
    if not done:
        return []
    best = min(r.completion_round for r in done)
    return [r for r in done if r.completion_round == best]


def _match_header(line: str) -> re.Match[str] | None:
    for rx in _DAY_HEADER_RES:
        m = rx.match(line)
        if m:
            return m
    return None


def _escape_call(label: str) -> str:
    s = label.strip()
    if s.startswith(_ESCAPE) or _match_header(s):
        return _ESCAPE + label
    return label


def parse_draw_text(text: str) -> list[DrawDay]:
    """Parse 'Day 1:' / '1:' delimited call lists.

    Lines before the first header are ignored. A line starting with a
    backslash is always a call (the backslash is dropped); format_draw_text
    writes header-like labels that way. Days are returned sorted by day number.
    """
    days: list[DrawDay] = []
    current_day: int | None = None
    current_calls: list[str] = []

    def push() -> None:
        if current_day is None:
            return
        days.append(DrawDay(day=current_day, calls=tuple(current_calls)))

    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.startswith(_ESCAPE):
            current_calls.append(line[len(_ESCAPE):])
            continue

        m = _match_header(line)
        if m:
            push()
            current_day = int(m.group(1))
            current_calls = []
            continue

        current_calls.append(line)

    push()
    days.sort(key=lambda d: d.day)
    return days


def format_draw_text(days: Iterable[DrawDay]) -> str:
    blocks: list[str] = []
    for d in days:
        blocks.append("\n".join([f"Day {d.day}:", *(_escape_call(c) for c in d.calls)]))
    return ("\n\n".join(blocks) + "\n") if blocks else ""


def rounds_from_state(state: CallerState) -> list[DrawDay]:
    return [DrawDay(day=i1, calls=r) for i1, r in enumerate(state.rounds, start=1)]


def day_rounds(days: Sequence[DrawDay]) -> list[tuple[str, ...]]:
    return [d.calls for d in days]
