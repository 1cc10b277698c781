from __future__ import annotations

import unittest

from pool import count_pool_items, default_pool, normalize_pool, pool_text


class TestNormalizePool(unittest.TestCase):
    def test_case_insensitive_dedupe_keeps_first_spelling(self) -> None:
        self.assertEqual(normalize_pool("Foo\nbar\nFOO\n\n  bar  "), ("Foo", "bar"))

    def test_dedupe_key_is_lower_not_casefold(self) -> None:
        self.assertEqual(normalize_pool(["Stra\u00dfe", "STRASSE", "strasse"]), ("Stra\u00dfe", "STRASSE"))

    def test_all_line_endings(self) -> None:
        raw = "a\r\nb\rc\nd\u2028e\u2029f"
        self.assertEqual(normalize_pool(raw), ("a", "b", "c", "d", "e", "f"))

    def test_internal_whitespace_is_kept(self) -> None:
        self.assertEqual(normalize_pool("  Cal  Mag \n"), ("Cal  Mag",))

    def test_list_input_coerces_primitives_and_drops_none(self) -> None:
        self.assertEqual(normalize_pool(["  x ", 3, None, "", "X", 3.5]), ("x", "3", "3.5"))

    def test_list_element_is_one_line(self) -> None:
        self.assertEqual(normalize_pool(["a b"]), ("a b",))

    def test_empty_inputs_are_not_errors(self) -> None:
        self.assertEqual(normalize_pool(""), ())
        self.assertEqual(normalize_pool("\n \n\t"), ())
        self.assertEqual(normalize_pool([]), ())
        self.assertEqual(normalize_pool(None), ())

    def test_idempotent(self) -> None:
        samples = [
            "Foo\nbar\nFOO\n\n  bar  ",
            "  z\r\ny\rY\r\n",
            ["b", "B ", " a", "", "A"],
        ]
        for raw in samples:
            once = normalize_pool(raw)
            self.assertEqual(normalize_pool(once), once, msg=f"not idempotent for {raw!r}")
            self.assertEqual(normalize_pool(pool_text(once)), once)

    def test_count(self) -> None:
        self.assertEqual(count_pool_items("a\nA\nb\n"), 2)


class TestDefaultPool(unittest.TestCase):
    def test_default_pool_is_big_enough_for_5x5(self) -> None:
        pool = default_pool()
        self.assertGreaterEqual(len(pool), 24)
        self.assertEqual(len({p.lower() for p in pool}), len(pool))


if __name__ == "__main__":
    unittest.main()
