from __future__ import annotations

"""Bingo grid generation and unique pack building.

A grid is a tuple of rows. The single free cell sits at the exact center
(row = col = size // 2) and holds the FREE sentinel (None, JSON null).

Pack building is rejection sampling: generate a grid, fingerprint it, keep it
only if the fingerprint is new. The number of attempts is bounded; when the
budget runs out we raise instead of returning a short pack.
"""

from dataclasses import dataclass, field
from typing import Iterator, Sequence
import random
import string
import time

from gb_utils import MAX_QUANTITY


FREE = None

_ID_ALPHABET = string.digits + string.ascii_uppercase
_FP_SEP = "\x1f"
_FP_FREE = "\x00FREE\x00"

Cell = str | None
Grid = tuple[tuple[Cell, ...], ...]


class InsufficientPoolError(ValueError):
    def __init__(self, required: int, actual: int) -> None:
        self.required = required
        self.actual = actual
        super().__init__(f"Need at least {required} unique items. You have {actual}.")


class UniquenessExhaustedError(ValueError):
    def __init__(self, quantity: int, pool_size: int, attempts: int, accepted: int) -> None:
        self.quantity = quantity
        self.pool_size = pool_size
        self.attempts = attempts
        self.accepted = accepted
        super().__init__(
            f"Could only build {accepted} of {quantity} unique cards from a pool of "
            f"{pool_size} items after {attempts} attempts. "
            "Add more items, lower the quantity, or use a larger grid."
        )


@dataclass(frozen=True)
class Card:
    id: str
    grid: Grid

    @property
    def size(self) -> int:
        return len(self.grid)

    def labels(self) -> list[str]:
        """Non-free labels, row-major."""
        return [c for row in self.grid for c in row if c is not FREE]


@dataclass(frozen=True)
class Pack:
    pack_id: str
    created_at: int
    grid_size: int
    cards: tuple[Card, ...]
    title: str | None = None
    sponsor_name: str | None = None
    meta: dict = field(default_factory=dict)

    @property
    def used_items(self) -> tuple[str, ...]:
        """Every distinct label on any card, in first-seen order."""
        seen: dict[str, None] = {}
        for card in self.cards:
            for label in card.labels():
                seen.setdefault(label, None)
        return tuple(seen)

    def card_by_id(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


def center_index(size: int) -> int:
    return size // 2


def required_pool_size(size: int) -> int:
    return size * size - 1


def default_attempt_budget(quantity: int) -> int:
    return max(2000, quantity * 200)


def _resolve_rng(rng: random.Random | None, seed: int | None = None) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


def generate_grid(pool: Sequence[str], size: int = 5, rng: random.Random | None = None) -> Grid:
    if size < 1:
        raise ValueError(f"size must be >= 1. Got {size}.")
    need = required_pool_size(size)
    if len(pool) < need:
        raise InsufficientPoolError(need, len(pool))

    rng = _resolve_rng(rng)
    shuffled = list(pool)
    rng.shuffle(shuffled)
    picked = iter(shuffled[:need])

    mid = center_index(size)
    rows: list[tuple[Cell, ...]] = []
    for r in range(size):
        row: list[Cell] = []
        for c in range(size):
            if r == mid and c == mid:
                row.append(FREE)
            else:
                row.append(next(picked))
        rows.append(tuple(row))
    return tuple(rows)


def grid_fingerprint(grid: Grid) -> str:
    return _FP_SEP.join(_FP_FREE if cell is FREE else cell for row in grid for cell in row)


def make_card_id(rng: random.Random | None = None, groups: int = 2) -> str:
    """Short, human-ish id like 'K3Q9-ZP0A' (4 base-36 chars per group)."""
    rng = _resolve_rng(rng)
    return "-".join("".join(rng.choice(_ID_ALPHABET) for _ in range(4)) for _ in range(groups))


def build_pack(
    pool: Sequence[str],
    quantity: int,
    size: int = 5,
    rng: random.Random | None = None,
    *,
    seed: int | None = None,
    max_attempts: int | None = None,
    max_quantity: int = MAX_QUANTITY,
    title: str | None = None,
    sponsor_name: str | None = None,
) -> Pack:
    if quantity < 1 or quantity > max_quantity:
        raise ValueError(f"quantity must be in 1..{max_quantity}. Got {quantity}.")
    need = required_pool_size(size)
    if len(pool) < need:
        raise InsufficientPoolError(need, len(pool))

    rng = _resolve_rng(rng, seed)
    budget = max_attempts if max_attempts is not None else default_attempt_budget(quantity)

    seen: set[str] = set()
    ids: set[str] = set()
    cards: list[Card] = []
    attempts = 0

    while len(cards) < quantity:
        if attempts >= budget:
            raise UniquenessExhaustedError(quantity, len(pool), attempts, len(cards))
        attempts += 1

        grid = generate_grid(pool, size, rng)
        fp = grid_fingerprint(grid)
        if fp in seen:
            continue
        seen.add(fp)

        card_id = make_card_id(rng)
        while card_id in ids:
            card_id = make_card_id(rng)
        ids.add(card_id)
        cards.append(Card(id=card_id, grid=grid))

    return Pack(
        pack_id=make_card_id(rng, groups=3),
        created_at=int(time.time() * 1000),
        grid_size=size,
        cards=tuple(cards),
        title=title,
        sponsor_name=sponsor_name,
        meta={"seed": seed, "attempts": attempts, "pool_size": len(pool)},
    )


def roster_rows(pack: Pack) -> Iterator[tuple[int, str]]:
    for i0, card in enumerate(pack.cards):
        yield i0 + 1, card.id


def _grid_from_rows(rows: object, card_id: str) -> Grid:
    if not isinstance(rows, list) or not rows:
        raise ValueError(f"Card {card_id}: grid must be a non-empty list of rows")
    size = len(rows)
    out: list[tuple[Cell, ...]] = []
    for row in rows:
        if not isinstance(row, list) or len(row) != size:
            raise ValueError(f"Card {card_id}: grid must be {size}x{size}")
        out.append(tuple(None if v is None else str(v) for v in row))
    return tuple(out)


def pack_to_dict(pack: Pack) -> dict:
    return {
        "packId": pack.pack_id,
        "createdAt": pack.created_at,
        "title": pack.title,
        "sponsorName": pack.sponsor_name,
        "gridSize": pack.grid_size,
        "cards": [{"id": c.id, "grid": [list(row) for row in c.grid]} for c in pack.cards],
        "usedItems": list(pack.used_items),
        "meta": dict(pack.meta),
    }


def pack_from_dict(doc: dict) -> Pack:
    cards_in = doc.get("cards") or []
    if not cards_in:
        raise ValueError("Pack has no cards")

    cards: list[Card] = []
    for i0, c in enumerate(cards_in):
        card_id = str(c.get("id") or f"C{i0 + 1:03d}")
        cards.append(Card(id=card_id, grid=_grid_from_rows(c.get("grid"), card_id)))

    grid_size = int(doc.get("gridSize") or cards[0].size)
    for card in cards:
        if card.size != grid_size:
            raise ValueError(f"Card {card.id} is {card.size}x{card.size}; pack grid size is {grid_size}")

    return Pack(
        pack_id=str(doc.get("packId") or ""),
        created_at=int(doc.get("createdAt") or 0),
        grid_size=grid_size,
        cards=tuple(cards),
        title=doc.get("title"),
        sponsor_name=doc.get("sponsorName"),
        meta=dict(doc.get("meta") or {}),
    )
