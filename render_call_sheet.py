from __future__ import annotations

"""Render a host-friendly call sheet (text) in three parts.

Inputs:
  - out/caller_state.json
  - out/winners.csv (optional)
Output:
  - out/call_sheet.txt

Part 2 is written in the same "Day N:" format that compute_winners.py reads,
so the sheet can be pasted back as a draw history.
"""

from pathlib import Path
import argparse
import csv

from caller import state_from_dict
from gb_utils import read_json
from winners import format_draw_text, rounds_from_state


def _read_winners_csv(path: Path) -> list[dict[str, str]]:
    if not path.is_file():
        raise SystemExit(f"Missing winners CSV: {path}")
    with path.open("r", encoding="utf-8", newline="") as f:
        r = csv.DictReader(f)
        return [dict(row) for row in r]


def _format_table(rows: list[dict[str, str]], cols: list[str]) -> list[str]:
    # Compute column widths from header + data
    widths: dict[str, int] = {c: len(c) for c in cols}
    for row in rows:
        for c in cols:
            widths[c] = max(widths[c], len(str(row.get(c, ""))))

    def fmt_row(d: dict[str, str]) -> str:
        return "  ".join(str(d.get(c, "")).ljust(widths[c]) for c in cols)

    header = "  ".join(c.ljust(widths[c]) for c in cols)
    sep = "  ".join(("-" * widths[c]) for c in cols)
    out = [header, sep]
    out.extend(fmt_row(r) for r in rows)
    return out


def main() -> None:
    ap = argparse.ArgumentParser(description="Render call_sheet.txt (settings + draw history + winners).")
    ap.add_argument("--state", required=True, help="Path to out/caller_state.json")
    ap.add_argument("--winners-csv", required=False, help="Path to out/winners.csv")
    ap.add_argument("--title", default="Grower Bingo", help="Sheet title")
    ap.add_argument("--out", required=True, help="Output out/call_sheet.txt")
    args = ap.parse_args()

    try:
        state = state_from_dict(read_json(Path(args.state)))
    except ValueError as e:
        raise SystemExit(str(e)) from e

    lines: list[str] = []
    lines.append(f"{args.title} — Call Sheet")
    lines.append("")
    lines.append("PART 1 — Game")
    lines.append("-------------")
    lines.append("")
    lines.append(f"Deck size       : {len(state.deck)}")
    lines.append(f"Rounds called   : {state.round}")
    lines.append(f"Items called    : {len(state.called)}")
    lines.append(f"Items remaining : {len(state.remaining)}")
    lines.append("")
    lines.append("PART 2 — Draw history")
    lines.append("---------------------")
    lines.append("")
    history = format_draw_text(rounds_from_state(state))
    if history:
        lines.extend(history.rstrip("\n").split("\n"))
    else:
        lines.append("(nothing called yet)")
    lines.append("")

    if args.winners_csv:
        rows = _read_winners_csv(Path(args.winners_csv))
        lines.append("PART 3 — Expected winners (blackout)")
        lines.append("------------------------------------")
        lines.append("")
        lines.append("Completion is computed from official calls only.")
        lines.append("• completion_day: the day the card's last square was called (blank = not complete)")
        lines.append("• claimed: whether a player has claimed the card")
        lines.append("")
        if rows:
            preferred = ["card_id", "completion_day", "required_count", "claimed", "claimed_by"]
            cols = list(rows[0].keys())
            cols_eff = [c for c in preferred if c in cols]
            lines.extend(_format_table(rows, cols_eff))
        else:
            lines.append("(no cards)")
        lines.append("")

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(lines).rstrip() + "\n", encoding="utf-8")
    print(f"Wrote call sheet: {out_path}")


if __name__ == "__main__":
    main()
