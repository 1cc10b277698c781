from __future__ import annotations

"""Generate a pack of unique bingo cards (JSON) from an item pool.

Pool: one item per line (default_pool.txt when --pool is not given).
Outputs:
  - out/pack.json
  - out/roster.csv  (card number + card id, for claim tracking)
"""

from pathlib import Path
import argparse
import csv

from bingo import (
    InsufficientPoolError,
    UniquenessExhaustedError,
    build_pack,
    pack_to_dict,
    roster_rows,
)
from gb_utils import GRID_SIZES, load_bingo_config, write_json
from pool import DEFAULT_POOL_PATH, read_pool_file


def write_roster_csv(path: Path, rows: list[tuple[int, str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["card_number", "card_id"])
        w.writerows(rows)


def main() -> None:
    ap = argparse.ArgumentParser(description="Generate a pack of unique bingo cards.")
    ap.add_argument("--config", default="config_bingo.json", help="Bingo config JSON (optional).")
    ap.add_argument("--pool", default=str(DEFAULT_POOL_PATH), help="Item pool, one per line.")
    ap.add_argument("--qty", type=int, default=None, help="Number of cards (overrides config).")
    ap.add_argument("--grid-size", type=int, choices=GRID_SIZES, default=None, help="Grid size N (NxN).")
    ap.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible pack.")
    ap.add_argument("--title", default=None, help="Pack title printed on every card.")
    ap.add_argument("--sponsor", default=None, help="Sponsor name printed on every card.")
    ap.add_argument("--out", default="out/pack.json", help="Output pack.json")
    ap.add_argument("--roster", default="out/roster.csv", help="Output roster CSV")
    args = ap.parse_args()

    try:
        cfg = load_bingo_config(Path(args.config)).pack
    except ValueError as e:
        raise SystemExit(str(e)) from e

    pool = read_pool_file(Path(args.pool))
    qty = args.qty if args.qty is not None else cfg.quantity
    grid_size = args.grid_size if args.grid_size is not None else cfg.grid_size
    seed = args.seed if args.seed is not None else cfg.seed

    # Product policy: clamp rather than reject, as the web form did
    qty_eff = max(1, min(cfg.max_quantity, qty))
    if qty_eff != qty:
        print(f"WARNING: quantity {qty} clamped to {qty_eff} (allowed 1..{cfg.max_quantity})")

    try:
        pack = build_pack(
            pool,
            qty_eff,
            grid_size,
            seed=seed,
            max_attempts=cfg.max_attempts,
            max_quantity=cfg.max_quantity,
            title=args.title if args.title is not None else cfg.title,
            sponsor_name=args.sponsor if args.sponsor is not None else cfg.sponsor_name,
        )
    except (InsufficientPoolError, UniquenessExhaustedError) as e:
        raise SystemExit(str(e)) from e

    write_json(Path(args.out), pack_to_dict(pack))
    write_roster_csv(Path(args.roster), list(roster_rows(pack)))
    print(
        f"Wrote pack: {args.out} ({len(pack.cards)} cards, {grid_size}x{grid_size}, "
        f"{len(pack.used_items)} of {len(pool)} items used, {pack.meta['attempts']} attempts)"
    )
    print(f"Wrote roster: {args.roster}")


if __name__ == "__main__":
    main()
