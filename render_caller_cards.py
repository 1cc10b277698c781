from __future__ import annotations

"""Render caller cards (one per deck item) in call order.

Input:
  - out/caller_state.json (deck order), or pack.json (usedItems)
  - icons/ (optional <label-slug>.svg)
Output:
  - caller_cards.pdf
"""

from pathlib import Path
import argparse

from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from svglib.svglib import svg2rlg
from reportlab.graphics import renderPDF

from caller import state_from_dict
from compose_cards import draw_label
from gb_utils import icon_path_for_label, read_json, try_register_unicode_font


def draw_svg_fit(c: canvas.Canvas, svg_path: Path, x: float, y: float, w: float, h: float, pad: float = 8 * mm) -> None:
    drawing = svg2rlg(str(svg_path))
    if drawing is None:
        print(f"WARNING: could not read SVG {svg_path}")
        return
    aw = max(1.0, w - 2 * pad)
    ah = max(1.0, h - 2 * pad)
    sx = aw / drawing.width
    sy = ah / drawing.height
    s = min(sx, sy)
    drawing.scale(s, s)
    dw = drawing.width * s
    dh = drawing.height * s
    dx = x + (w - dw) / 2.0
    dy = y + (h - dh) / 2.0
    renderPDF.draw(drawing, c, dx, dy)


def main() -> None:
    ap = argparse.ArgumentParser(description="Render caller cards PDF")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--state", help="Path to caller_state.json (cards in deck order)")
    src.add_argument("--pack", help="Path to pack.json (cards for every used item)")
    ap.add_argument("--icons", default="icons", help="Directory of <label-slug>.svg icons")
    ap.add_argument("--title", default="", help="Small footer title")
    ap.add_argument("--out", required=True, help="Output caller_cards.pdf")
    args = ap.parse_args()

    if args.state:
        try:
            items = list(state_from_dict(read_json(Path(args.state))).deck)
        except ValueError as e:
            raise SystemExit(str(e)) from e
    else:
        items = list(read_json(Path(args.pack)).get("usedItems") or [])
    if not items:
        raise SystemExit("No items to render.")

    icons_dir = Path(args.icons)
    if not icons_dir.is_dir():
        icons_dir = None

    # PDF setup: A4 portrait, 1 caller card per page
    page_w, page_h = A4
    c = canvas.Canvas(str(args.out), pagesize=A4)

    font_name, warn = try_register_unicode_font()
    text_font = font_name or "Helvetica"
    if warn:
        print(f"WARNING: {warn}")

    n_items = len(items)
    for i1, label in enumerate(items, start=1):
        # Layout
        margin = 16 * mm
        box_x = margin
        box_y = margin + 30 * mm
        box_w = page_w - 2 * margin
        box_h = page_h - 2 * margin - 40 * mm

        icon = icon_path_for_label(icons_dir, label)
        if icon is not None:
            draw_svg_fit(c, icon, box_x, box_y + box_h * 0.4, box_w, box_h * 0.6, pad=10 * mm)
            draw_label(c, label, box_x, box_y, box_w, box_h * 0.4, font=text_font, size=40)
        else:
            draw_label(c, label, box_x, box_y, box_w, box_h, font=text_font, size=54)

        # Footer: call number
        c.setFont("Helvetica", 14)
        c.drawString(margin, margin + 18 * mm, f"#{i1} of {n_items}")

        if args.title:
            c.setFont(text_font, 8)
            c.drawString(margin, margin + 6 * mm, args.title)

        c.showPage()

    c.save()
    print(f"Wrote caller cards: {args.out} ({n_items} pages)")


if __name__ == "__main__":
    main()
