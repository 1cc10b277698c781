from __future__ import annotations

"""Normalize a free-text (or list) item pool.

Lines are trimmed, blank lines dropped, and duplicates removed
case-insensitively while keeping the first spelling seen. The key is
str.lower(), not casefold(), so "Straße" and "STRASSE" are different items.
"""

from pathlib import Path
from typing import Iterable


DEFAULT_POOL_PATH = Path(__file__).resolve().parent / "default_pool.txt"

Pool = tuple[str, ...]


def _candidate_lines(raw: str | Iterable[object] | None) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        # splitlines covers \n, \r\n, \r and the Unicode separators
        return raw.splitlines()
    out: list[str] = []
    for x in raw:
        if x is None:
            continue
        out.append(x if isinstance(x, str) else str(x))
    return out


def normalize_pool(raw: str | Iterable[object] | None) -> Pool:
    seen: set[str] = set()
    out: list[str] = []
    for line in _candidate_lines(raw):
        s = line.strip()
        if not s:
            continue
        k = s.lower()
        if k in seen:
            continue
        seen.add(k)
        out.append(s)
    return tuple(out)


def pool_text(pool: Iterable[str]) -> str:
    return "\n".join(pool)


def count_pool_items(raw: str | Iterable[object] | None) -> int:
    return len(normalize_pool(raw))


def read_pool_file(path: Path) -> Pool:
    if not path.is_file():
        raise FileNotFoundError(f"Missing pool file: {path}")
    return normalize_pool(path.read_text(encoding="utf-8"))


def default_pool() -> Pool:
    return read_pool_file(DEFAULT_POOL_PATH)
