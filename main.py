# main.py
from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path


def run_py(script: str, *args: str) -> None:
    """Run one of our project scripts using the current Python interpreter."""
    subprocess.run([sys.executable, script, *args], check=True)


def main() -> None:
    ap = argparse.ArgumentParser(description="Grower Bingo: pack + caller + winners pipeline")
    ap.add_argument("--out-dir", default="out", help="Directory for computed artifacts (JSON/CSV/PDF/TXT).")
    ap.add_argument("--config", default="config_bingo.json", help="Bingo config JSON.")
    ap.add_argument("--pool", default="default_pool.txt", help="Item pool, one per line.")
    ap.add_argument("--icons", default="icons", help="Directory of <label-slug>.svg icons.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for both pack and caller deck.")
    ap.add_argument("--skip-cards", action="store_true", help="Skip bingo cards PDF.")
    ap.add_argument("--skip-caller", action="store_true", help="Skip caller cards PDF.")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    pack_json = out_dir / "pack.json"
    roster_csv = out_dir / "roster.csv"
    bingo_cards_pdf = out_dir / "bingo_cards.pdf"
    caller_state = out_dir / "caller_state.json"
    draws_txt = out_dir / "draws.txt"
    caller_cards_pdf = out_dir / "caller_cards.pdf"
    winners_json = out_dir / "winners.json"
    winners_csv = out_dir / "winners.csv"
    call_sheet_txt = out_dir / "call_sheet.txt"

    seed_args = ["--seed", str(args.seed)] if args.seed is not None else []

    run_py(
        "generate_pack.py",
        "--config",
        str(args.config),
        "--pool",
        str(args.pool),
        "--out",
        str(pack_json),
        "--roster",
        str(roster_csv),
        *seed_args,
    )

    if not args.skip_cards:
        run_py(
            "compose_cards.py",
            "--pack",
            str(pack_json),
            "--icons",
            str(args.icons),
            "--out",
            str(bingo_cards_pdf),
        )

    # New pack, new game: the deck is built from the items that appear on cards
    run_py(
        "run_caller.py",
        "--config",
        str(args.config),
        "--state",
        str(caller_state),
        "--draws",
        str(draws_txt),
        "start",
        "--pack",
        str(pack_json),
        *seed_args,
    )

    if not args.skip_caller:
        run_py(
            "render_caller_cards.py",
            "--state",
            str(caller_state),
            "--icons",
            str(args.icons),
            "--out",
            str(caller_cards_pdf),
        )

    run_py(
        "compute_winners.py",
        "--pack",
        str(pack_json),
        "--state",
        str(caller_state),
        "--out-json",
        str(winners_json),
        "--out-csv",
        str(winners_csv),
    )

    run_py(
        "render_call_sheet.py",
        "--state",
        str(caller_state),
        "--winners-csv",
        str(winners_csv),
        "--out",
        str(call_sheet_txt),
    )

    print("Done.")
    print("Key outputs:")
    print(f" - {pack_json}")
    print(f" - {roster_csv}")
    print(f" - {bingo_cards_pdf}")
    print(f" - {caller_cards_pdf}")
    print(f" - {winners_csv}")
    print(f" - {call_sheet_txt}")
    print("Call rounds with: python run_caller.py draw")


if __name__ == "__main__":
    main()
