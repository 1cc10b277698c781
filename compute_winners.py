from __future__ import annotations

"""Compute expected winners (blackout) for a pack from the official calls.

Inputs:
  - out/pack.json
  - out/caller_state.json (rounds as called), or
    out/draws.txt ("Day N:" blocks, one call per line; hand-edited histories)
  - claims.json    (optional; {cardId: {claimed, claimedBy, claimedAt}})
Outputs:
  - out/winners.json
  - out/winners.csv

Completion is reported as a round index and the "Day" label it came from.
Claims are informational only; they never change the computed completion.
"""

from pathlib import Path
import argparse
import csv

from bingo import pack_from_dict
from gb_utils import read_json, write_json
from caller import state_from_dict
from winners import (
    DrawDay,
    compute_expected_winners,
    day_rounds,
    first_completers,
    parse_draw_text,
    rounds_from_state,
)


def _load_claims(path: Path | None) -> dict[str, dict]:
    if path is None:
        return {}
    if not path.is_file():
        print(f"WARNING: claims file not found: {path}")
        return {}
    doc = read_json(path)
    if not isinstance(doc, dict):
        print(f"WARNING: claims file is not a JSON object, ignoring: {path}")
        return {}
    out: dict[str, dict] = {}
    for k, v in doc.items():
        if v is None:
            continue
        if not isinstance(v, dict):
            print(f"WARNING: ignoring claim for {k}: expected an object, got {v!r}")
            continue
        out[str(k)] = dict(v)
    return out


def _load_days(args: argparse.Namespace) -> list[DrawDay]:
    if args.state:
        try:
            return rounds_from_state(state_from_dict(read_json(Path(args.state))))
        except ValueError as e:
            raise SystemExit(str(e)) from e

    draws_path = Path(args.draws)
    if not draws_path.is_file():
        raise SystemExit(f"Missing draw history: {draws_path}")
    return parse_draw_text(draws_path.read_text(encoding="utf-8"))


def main() -> None:
    ap = argparse.ArgumentParser(description="Compute expected winners from the draw history")
    ap.add_argument("--pack", required=True, help="Path to out/pack.json")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--state", help="Path to out/caller_state.json")
    src.add_argument("--draws", help="Path to a draws.txt history")
    ap.add_argument("--claims", required=False, help="Optional claims.json")
    ap.add_argument("--out-json", required=True, help="Output winners.json")
    ap.add_argument("--out-csv", required=True, help="Output winners.csv")
    args = ap.parse_args()

    try:
        pack = pack_from_dict(read_json(Path(args.pack)))
    except ValueError as e:
        raise SystemExit(str(e)) from e

    days = _load_days(args)
    claims = _load_claims(Path(args.claims) if args.claims else None)

    rows = compute_expected_winners(pack, day_rounds(days))
    first = first_completers(rows)

    rows_out: list[dict] = []
    for r in rows:
        claim = claims.get(r.card_id) or {}
        rows_out.append(
            {
                "card_id": r.card_id,
                "completion_round": r.completion_round,
                "completion_day": days[r.completion_round - 1].day if r.completion_round else None,
                "required_count": r.required_count,
                "claimed": bool(claim.get("claimed")),
                "claimed_by": claim.get("claimedBy") or "",
                "claimed_at": claim.get("claimedAt"),
            }
        )

    out = {
        "packId": pack.pack_id,
        "title": pack.title,
        "n_cards": len(pack.cards),
        "n_rounds": len(days),
        "n_called": sum(len(d.calls) for d in days),
        "first_completers": [r.card_id for r in first],
        "first_completion_round": first[0].completion_round if first else None,
        "rows": rows_out,
    }
    write_json(Path(args.out_json), out)

    csv_cols = [
        "card_id",
        "completion_round",
        "completion_day",
        "required_count",
        "claimed",
        "claimed_by",
        "claimed_at",
    ]

    out_csv = Path(args.out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=csv_cols)
        w.writeheader()
        for r in rows_out:
            w.writerow({k: ("" if r.get(k) is None else r.get(k)) for k in csv_cols})

    if first:
        print(f"First completers (day {rows_out[0]['completion_day']}): {', '.join(r.card_id for r in first)}")
    else:
        print("No card has completed yet.")
    print(f"Wrote winners JSON: {args.out_json}")
    print(f"Wrote winners CSV : {args.out_csv}")


if __name__ == "__main__":
    main()
