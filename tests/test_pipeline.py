from __future__ import annotations

import csv
import json
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from bingo import Pack, build_pack, pack_from_dict
from winners import parse_draw_text


REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(script: str, *args: str, cwd: Path = REPO_ROOT) -> str:
    proc = subprocess.run(
        [sys.executable, str(REPO_ROOT / script), *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return proc.stdout


class TestScriptPipeline(unittest.TestCase):
    """Runs the file-based steps end to end in a temp directory."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.out = Path(self._tmp.name)
        self.pack_json = self.out / "pack.json"
        self.state_json = self.out / "caller_state.json"
        self.draws_txt = self.out / "draws.txt"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _caller(self, *args: str) -> str:
        return _run("run_caller.py", "--state", str(self.state_json), "--draws", str(self.draws_txt), *args)

    def test_generate_call_and_score(self) -> None:
        _run(
            "generate_pack.py",
            "--qty", "12",
            "--grid-size", "3",
            "--seed", "5",
            "--title", "Test Night",
            "--out", str(self.pack_json),
            "--roster", str(self.out / "roster.csv"),
        )
        pack = pack_from_dict(json.loads(self.pack_json.read_text(encoding="utf-8")))
        self.assertEqual(len(pack.cards), 12)
        self.assertEqual(pack.grid_size, 3)
        self.assertEqual(pack.title, "Test Night")

        with (self.out / "roster.csv").open(encoding="utf-8", newline="") as f:
            roster = list(csv.DictReader(f))
        self.assertEqual([r["card_id"] for r in roster], [c.id for c in pack.cards])

        self._caller("start", "--pack", str(self.pack_json), "--seed", "5")
        state = json.loads(self.state_json.read_text(encoding="utf-8"))
        self.assertEqual(sorted(state["deck"]), sorted(pack.used_items))

        self._caller("draw", "--size", "4")
        self._caller("draw", "--size", "4")
        self._caller("undo")
        self._caller("draw", "--size", "1000")
        out = self._caller("draw")
        self.assertIn("exhausted", out)

        days = parse_draw_text(self.draws_txt.read_text(encoding="utf-8"))
        self.assertEqual([d.day for d in days], [1, 2])
        self.assertEqual(len(days[0].calls), 4)
        self.assertEqual(sorted(days[0].calls + days[1].calls), sorted(pack.used_items))

        _run(
            "compute_winners.py",
            "--pack", str(self.pack_json),
            "--draws", str(self.draws_txt),
            "--out-json", str(self.out / "winners.json"),
            "--out-csv", str(self.out / "winners.csv"),
        )
        winners = json.loads((self.out / "winners.json").read_text(encoding="utf-8"))
        self.assertEqual(winners["n_cards"], 12)
        self.assertEqual(len(winners["rows"]), 12)
        self.assertTrue(all(r["completion_day"] in (1, 2) for r in winners["rows"]))
        self.assertTrue(winners["first_completers"])

        # Scoring straight from the caller state gives the same report
        _run(
            "compute_winners.py",
            "--pack", str(self.pack_json),
            "--state", str(self.state_json),
            "--out-json", str(self.out / "winners_state.json"),
            "--out-csv", str(self.out / "winners_state.csv"),
        )
        from_state = json.loads((self.out / "winners_state.json").read_text(encoding="utf-8"))
        self.assertEqual(from_state["rows"], winners["rows"])

        _run(
            "render_call_sheet.py",
            "--state", str(self.state_json),
            "--winners-csv", str(self.out / "winners.csv"),
            "--out", str(self.out / "call_sheet.txt"),
        )
        sheet = (self.out / "call_sheet.txt").read_text(encoding="utf-8")
        self.assertIn("Day 1:", sheet)
        self.assertIn("PART 3", sheet)
        self.assertEqual(len(parse_draw_text(sheet.split("PART 3")[0])), 2)

    def _fail(self, script: str, *args: str) -> subprocess.CompletedProcess:
        proc = subprocess.run(
            [sys.executable, str(REPO_ROOT / script), *args],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
        )
        self.assertNotEqual(proc.returncode, 0, msg=proc.stdout)
        return proc

    def _small_pack(self) -> Pack:
        _run(
            "generate_pack.py",
            "--qty", "3",
            "--grid-size", "3",
            "--seed", "2",
            "--title", "Test Night",
            "--out", str(self.pack_json),
            "--roster", str(self.out / "roster.csv"),
        )
        return pack_from_dict(json.loads(self.pack_json.read_text(encoding="utf-8")))

    def test_numeric_labels_score_from_state(self) -> None:
        pool = self.out / "numbers.txt"
        pool.write_text("\n".join(str(i) for i in range(1, 31)) + "\n", encoding="utf-8")
        _run(
            "generate_pack.py",
            "--pool", str(pool),
            "--qty", "4",
            "--grid-size", "3",
            "--seed", "8",
            "--out", str(self.pack_json),
            "--roster", str(self.out / "roster.csv"),
        )
        self._caller("start", "--pack", str(self.pack_json), "--seed", "8")
        self._caller("draw", "--size", "1000")
        for flag, path in (("--state", self.state_json), ("--draws", self.draws_txt)):
            out_json = self.out / f"winners{flag}.json"
            _run(
                "compute_winners.py",
                "--pack", str(self.pack_json),
                flag, str(path),
                "--out-json", str(out_json),
                "--out-csv", str(self.out / "winners.csv"),
            )
            winners = json.loads(out_json.read_text(encoding="utf-8"))
            self.assertEqual(winners["n_rounds"], 1, msg=flag)
            self.assertTrue(all(r["completion_round"] == 1 for r in winners["rows"]), msg=flag)

    def test_malformed_claims_are_skipped_with_warning(self) -> None:
        pack = self._small_pack()
        self._caller("start", "--pack", str(self.pack_json), "--seed", "2")
        card_id = pack.cards[0].id
        claims = self.out / "claims.json"
        claims.write_text(
            json.dumps({"X": True, "Y": "yes", card_id: {"claimed": True, "claimedBy": "Sam"}}),
            encoding="utf-8",
        )
        out = _run(
            "compute_winners.py",
            "--pack", str(self.pack_json),
            "--state", str(self.state_json),
            "--claims", str(claims),
            "--out-json", str(self.out / "winners.json"),
            "--out-csv", str(self.out / "winners.csv"),
        )
        self.assertIn("WARNING: ignoring claim for X", out)
        self.assertIn("WARNING: ignoring claim for Y", out)
        rows = json.loads((self.out / "winners.json").read_text(encoding="utf-8"))["rows"]
        claimed = {r["card_id"]: r["claimed_by"] for r in rows if r["claimed"]}
        self.assertEqual(claimed, {card_id: "Sam"})

    def test_zero_deck_size_is_rejected(self) -> None:
        pool = self.out / "pool.txt"
        pool.write_text("a\nb\nc\n", encoding="utf-8")
        proc = self._fail(
            "run_caller.py", "--state", str(self.state_json), "start", "--pool", str(pool), "--deck-size", "0"
        )
        self.assertIn("Deck size (0)", proc.stderr)
        self.assertFalse(self.state_json.exists())

    def test_zero_draw_size_is_rejected(self) -> None:
        pool = self.out / "pool.txt"
        pool.write_text("a\nb\nc\n", encoding="utf-8")
        self._caller("start", "--pool", str(pool))
        proc = self._fail(
            "run_caller.py", "--state", str(self.state_json), "--draws", str(self.draws_txt), "draw", "--size", "0"
        )
        self.assertIn("Batch size must be >= 1", proc.stderr)
        self.assertEqual(json.loads(self.state_json.read_text(encoding="utf-8"))["rounds"], [])

    def test_single_card_pdf_default_name(self) -> None:
        pack = self._small_pack()
        card_id = pack.cards[1].id
        out = _run("compose_cards.py", "--pack", str(self.pack_json), "--card", card_id, cwd=self.out)
        pdf = self.out / "out" / f"Test_Night-{card_id}.pdf"
        self.assertIn("Wrote 1 card(s)", out)
        self.assertTrue(pdf.read_bytes().startswith(b"%PDF"))

    def test_caller_cards_pdf(self) -> None:
        self._small_pack()
        self._caller("start", "--pack", str(self.pack_json), "--seed", "2")
        pdf = self.out / "caller_cards.pdf"
        _run("render_caller_cards.py", "--state", str(self.state_json), "--out", str(pdf), cwd=self.out)
        self.assertTrue(pdf.read_bytes().startswith(b"%PDF"))

    def test_insufficient_pool_exits_with_message(self) -> None:
        pool = self.out / "tiny.txt"
        pool.write_text("a\nb\nc\n", encoding="utf-8")
        proc = subprocess.run(
            [sys.executable, str(REPO_ROOT / "generate_pack.py"), "--pool", str(pool), "--out", str(self.pack_json)],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
        )
        self.assertNotEqual(proc.returncode, 0)
        self.assertIn("Need at least 24 unique items", proc.stderr)

    def test_deck_larger_than_pool_exits(self) -> None:
        pool = self.out / "pool.txt"
        pool.write_text("a\nb\nc\n", encoding="utf-8")
        proc = subprocess.run(
            [
                sys.executable, str(REPO_ROOT / "run_caller.py"),
                "--state", str(self.state_json),
                "start", "--pool", str(pool), "--deck-size", "4",
            ],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
        )
        self.assertNotEqual(proc.returncode, 0)
        self.assertIn("Deck size (4)", proc.stderr)


class TestPdfRendering(unittest.TestCase):
    def test_pack_and_single_card_pdf(self) -> None:
        from compose_cards import render_pack_pdf

        pool = ["Cal-Mag", "Fungus gnats"] + [f"Topic {i}" for i in range(30)]
        pack = build_pack(pool, 3, 5, seed=1, title="Harvest Heroes Bingo", sponsor_name="Joe's Grows")
        with tempfile.TemporaryDirectory() as tmp:
            out_pdf = Path(tmp) / "pack.pdf"
            n = render_pack_pdf(pack, out_pdf, icons_dir=REPO_ROOT / "icons")
            self.assertEqual(n, 3)
            self.assertTrue(out_pdf.read_bytes().startswith(b"%PDF"))

            one = Path(tmp) / "one.pdf"
            n = render_pack_pdf(pack, one, cards=[pack.cards[0]], logo_svg=REPO_ROOT / "icons" / "cal-mag.svg")
            self.assertEqual(n, 1)
            self.assertTrue(one.read_bytes().startswith(b"%PDF"))

    def test_title_uses_registered_font(self) -> None:
        from compose_cards import bold_font_for

        self.assertEqual(bold_font_for("Helvetica"), "Helvetica-Bold")
        self.assertEqual(bold_font_for("DejaVuSans"), "DejaVuSans")


if __name__ == "__main__":
    unittest.main()
