from __future__ import annotations

"""Run a caller game backed by a JSON state file.

  start  : build a fresh deck from a pool (pack usedItems or a pool file)
  draw   : call the next batch; no repeats until the deck is exhausted
  undo   : take back the last batch
  reset  : same deck, nothing called
  status : print called / remaining counts and the latest round

State: out/caller_state.json
Every draw/undo also rewrites out/draws.txt in "Day N:" form so the winners
step can read the history.
"""

from pathlib import Path
import argparse
import random

from caller import (
    CallerState,
    InvalidDeckSizeError,
    build_deck,
    draw_next,
    reset,
    state_from_dict,
    state_to_dict,
    undo_last,
)
from gb_utils import load_bingo_config, read_json, write_json
from pool import Pool, read_pool_file
from winners import format_draw_text, rounds_from_state


def _load_pool(args: argparse.Namespace) -> Pool:
    if args.pack:
        doc = read_json(Path(args.pack))
        items = tuple(doc.get("usedItems") or [])
        if not items:
            raise SystemExit(f"No usedItems in {args.pack}")
        return items
    return read_pool_file(Path(args.pool))


def _load_state(path: Path) -> CallerState:
    if not path.is_file():
        raise SystemExit(f"No game in progress ({path} missing). Run: run_caller.py start")
    try:
        return state_from_dict(read_json(path))
    except ValueError as e:
        raise SystemExit(str(e)) from e


def _save(state: CallerState, state_path: Path, draws_path: Path) -> None:
    write_json(state_path, state_to_dict(state))
    draws_path.parent.mkdir(parents=True, exist_ok=True)
    draws_path.write_text(format_draw_text(rounds_from_state(state)), encoding="utf-8")


def _print_status(state: CallerState) -> None:
    print(f"Round {state.round}: called {len(state.called)} / {len(state.deck)}, remaining {len(state.remaining)}")


def main() -> None:
    ap = argparse.ArgumentParser(description="Caller: draw items in rounds with no repeats.")
    ap.add_argument("--config", default="config_bingo.json", help="Bingo config JSON (optional).")
    ap.add_argument("--state", default="out/caller_state.json", help="Caller state JSON.")
    ap.add_argument("--draws", default="out/draws.txt", help="Draw history text (Day N: blocks).")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("start", help="Build a new deck.")
    src = sp.add_mutually_exclusive_group(required=True)
    src.add_argument("--pack", help="Use usedItems from this pack.json.")
    src.add_argument("--pool", help="Use this pool file (one item per line).")
    sp.add_argument("--deck-size", type=int, default=None, help="Deck size (default: config, else whole pool).")
    sp.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible deck.")

    dp = sub.add_parser("draw", help="Call the next batch.")
    dp.add_argument("--size", type=int, default=None, help="Batch size (default: config draw_size).")

    sub.add_parser("undo", help="Take back the last batch.")
    sub.add_parser("reset", help="Keep the deck, clear all calls.")
    sub.add_parser("status", help="Show progress.")
    args = ap.parse_args()

    try:
        cfg = load_bingo_config(Path(args.config)).caller
    except ValueError as e:
        raise SystemExit(str(e)) from e

    state_path = Path(args.state)
    draws_path = Path(args.draws)

    if args.cmd == "start":
        pool = _load_pool(args)
        deck_size = args.deck_size if args.deck_size is not None else cfg.deck_size
        if deck_size is None:
            deck_size = len(pool)
        try:
            state = build_deck(pool, deck_size, random.Random(args.seed))
        except InvalidDeckSizeError as e:
            raise SystemExit(f"{e} Reduce deck size or add more items.") from e
        _save(state, state_path, draws_path)
        print(f"Started game: deck of {len(state.deck)} from {len(pool)} items -> {state_path}")
        return

    state = _load_state(state_path)

    if args.cmd == "draw":
        size = args.size if args.size is not None else cfg.draw_size
        if size < 1:
            raise SystemExit(f"Batch size must be >= 1. Got {size}.")
        res = draw_next(state, size)
        if not res.drawn:
            print("Deck exhausted; nothing left to call.")
            return
        _save(res.state, state_path, draws_path)
        print(f"Round {res.state.round} ({len(res.drawn)} called):")
        for item in res.drawn:
            print(f"  {item}")
        if res.done:
            print("Deck exhausted.")
    elif args.cmd == "undo":
        if not state.rounds:
            print("Nothing to undo.")
            return
        state = undo_last(state)
        _save(state, state_path, draws_path)
        print("Undid last round.")
        _print_status(state)
    elif args.cmd == "reset":
        state = reset(state)
        _save(state, state_path, draws_path)
        print("Cleared all calls (same deck).")
    else:
        _print_status(state)
        if state.rounds:
            print("Latest: " + ", ".join(state.rounds[-1]))


if __name__ == "__main__":
    main()
