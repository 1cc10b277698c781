# compose_cards.py
from __future__ import annotations

from pathlib import Path
import argparse

from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from svglib.svglib import svg2rlg
from reportlab.graphics import renderPDF

from bingo import FREE, Card, Pack, pack_from_dict
from gb_utils import (
    icon_path_for_label,
    read_json,
    sanitize_filename,
    try_register_unicode_font,
)


FOOTER_NOTE = "Verification: Screenshot your card with your Card ID visible when you claim bingo."


def bold_font_for(font: str) -> str:
    """Bold face for user text. A registered TTF has no bold variant, so it is used as is."""
    return "Helvetica-Bold" if font == "Helvetica" else font


def draw_grid(
    c: canvas.Canvas, x0: float, y0: float, w: float, h: float, rows: int, cols: int, lw: float = 1.0
) -> None:
    c.setLineWidth(lw)
    c.rect(x0, y0, w, h)
    for j in range(1, cols):
        x = x0 + w * j / cols
        c.line(x, y0, x, y0 + h)
    for i in range(1, rows):
        y = y0 + h * i / rows
        c.line(x0, y, x0 + w, y)


def place_svg_in_cell(
    c: canvas.Canvas,
    svg_path: Path,
    cell_x: float,
    cell_y: float,
    cell_w: float,
    cell_h: float,
    pad: float = 3 * mm,
) -> None:
    drawing = svg2rlg(str(svg_path))
    if drawing is None:
        print(f"WARNING: could not read SVG {svg_path}")
        return

    # Available box inside the cell
    aw = max(1.0, cell_w - 2 * pad)
    ah = max(1.0, cell_h - 2 * pad)

    # Scale to fit (preserve aspect ratio)
    sx = aw / drawing.width
    sy = ah / drawing.height
    s = min(1.0, sx, sy)  # never enlarge, only shrink if needed

    # IMPORTANT: renderPDF.draw doesn't respect drawing.scale reliably across versions
    # if you also adjust drawing.width/height. So we scale via transform.
    drawing.scale(s, s)

    # Center in the cell
    dw = drawing.width * s
    dh = drawing.height * s
    dx = cell_x + (cell_w - dw) / 2.0
    dy = cell_y + (cell_h - dh) / 2.0

    renderPDF.draw(drawing, c, dx, dy)


def draw_label(
    c: canvas.Canvas,
    text: str,
    x: float,
    y: float,
    w: float,
    h: float,
    *,
    font: str,
    size: float,
    pad: float = 2 * mm,
) -> None:
    """Centered, word-wrapped label; shrinks the font until it fits."""
    aw = max(1.0, w - 2 * pad)
    ah = max(1.0, h - 2 * pad)
    while True:
        lines = simpleSplit(text, font, size, aw)
        leading = size * 1.15
        if len(lines) * leading <= ah or size <= 5:
            break
        size -= 0.5

    c.setFont(font, size)
    block_h = len(lines) * leading
    top = y + (h + block_h) / 2.0 - size
    for i, line in enumerate(lines):
        c.drawCentredString(x + w / 2.0, top - i * leading, line)


def _draw_header(
    c: canvas.Canvas,
    *,
    x: float,
    y_top: float,
    w: float,
    title: str,
    sponsor_name: str,
    font: str,
) -> float:
    """Dark title band. Returns the y coordinate of its bottom edge."""
    band_h = 18 * mm
    y = y_top - band_h
    c.setFillGray(0.07)
    c.roundRect(x, y, w, band_h, 3 * mm, stroke=0, fill=1)
    c.setFillGray(1.0)
    c.setFont(bold_font_for(font), 16)
    c.drawString(x + 4 * mm, y + band_h - 8 * mm, title)
    if sponsor_name:
        c.setFont(font, 11)
        c.drawString(x + 4 * mm, y + 4 * mm, f"Sponsor: {sponsor_name}")
    c.setFillGray(0.0)
    return y


def _draw_card_strip(c: canvas.Canvas, *, x: float, y_top: float, w: float, card: Card) -> float:
    strip_h = 9 * mm
    y = y_top - strip_h
    c.setFillGray(0.95)
    c.setLineWidth(1.0)
    c.rect(x, y, w, strip_h, stroke=1, fill=1)
    c.setFillGray(0.0)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(x + 3 * mm, y + 3.2 * mm, f"Card ID: {card.id}")
    c.setFont("Helvetica", 10)
    n = card.size
    c.drawRightString(x + w - 3 * mm, y + 3.2 * mm, f"{n}×{n} • Center is FREE")
    return y


def draw_card_page(
    c: canvas.Canvas,
    card: Card,
    *,
    title: str,
    sponsor_name: str,
    font: str,
    icons_dir: Path | None,
    logo_svg: Path | None,
) -> None:
    page_w, page_h = LETTER
    margin = 12 * mm
    content_w = page_w - 2 * margin

    y = _draw_header(
        c, x=margin, y_top=page_h - margin, w=content_w, title=title, sponsor_name=sponsor_name, font=font
    )
    y = _draw_card_strip(c, x=margin, y_top=y - 4 * mm, w=content_w, card=card)

    n = card.size
    grid_w = content_w
    grid_h = min(grid_w, y - margin - 12 * mm)
    grid_x0 = margin
    grid_y0 = y - grid_h
    cell_w = grid_w / n
    cell_h = grid_h / n
    text_size = {3: 16, 4: 13}.get(n, 11)

    for r, row in enumerate(card.grid):
        for col, cell in enumerate(row):
            cx = grid_x0 + col * cell_w
            cy = grid_y0 + (n - 1 - r) * cell_h

            if cell is FREE:
                c.setFillGray(0.07)
                c.rect(cx, cy, cell_w, cell_h, stroke=0, fill=1)
                c.setFillGray(1.0)
                if logo_svg is not None:
                    c.setFont(bold_font_for(font), 10)
                    c.drawCentredString(cx + cell_w / 2.0, cy + cell_h - 6 * mm, (sponsor_name or "FREE").upper())
                    place_svg_in_cell(c, logo_svg, cx, cy, cell_w, cell_h - 6 * mm, pad=4 * mm)
                else:
                    draw_label(c, "FREE", cx, cy, cell_w, cell_h, font="Helvetica-Bold", size=text_size + 2)
                c.setFillGray(0.0)
                continue

            icon = icon_path_for_label(icons_dir, cell)
            if icon is not None:
                # Icon in the upper 60%, label underneath
                place_svg_in_cell(c, icon, cx, cy + cell_h * 0.4, cell_w, cell_h * 0.6, pad=2 * mm)
                draw_label(c, cell, cx, cy, cell_w, cell_h * 0.4, font=font, size=text_size - 2)
            else:
                draw_label(c, cell, cx, cy, cell_w, cell_h, font=font, size=text_size)

    c.setFillGray(0.0)
    draw_grid(c, grid_x0, grid_y0, grid_w, grid_h, n, n, lw=1.2)

    c.setFont("Helvetica", 9)
    c.setFillGray(0.35)
    c.drawString(margin, grid_y0 - 7 * mm, FOOTER_NOTE)
    c.setFillGray(0.0)


def render_pack_pdf(
    pack: Pack,
    out_pdf: Path,
    *,
    cards: list[Card] | None = None,
    icons_dir: Path | None = None,
    logo_svg: Path | None = None,
) -> int:
    font_name, warn = try_register_unicode_font()
    if warn:
        print(f"WARNING: {warn}")
    font = font_name or "Helvetica"

    if icons_dir is not None and not icons_dir.is_dir():
        print(f"WARNING: icons directory not found: {icons_dir} (rendering text only)")
        icons_dir = None
    if logo_svg is not None and not logo_svg.is_file():
        print(f"WARNING: logo not found: {logo_svg} (printing FREE)")
        logo_svg = None

    selected = list(pack.cards) if cards is None else cards
    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(out_pdf), pagesize=LETTER)
    c.setTitle(pack.title or "Bingo Pack")

    # One card per page (print-friendly)
    for card in selected:
        draw_card_page(
            c,
            card,
            title=pack.title or "Bingo Pack",
            sponsor_name=pack.sponsor_name or "",
            font=font,
            icons_dir=icons_dir,
            logo_svg=logo_svg,
        )
        c.showPage()

    c.save()
    return len(selected)


def main() -> None:
    ap = argparse.ArgumentParser(description="Render bingo cards from pack.json (one card per page).")
    ap.add_argument("--pack", type=str, default="out/pack.json", help="Path to pack.json.")
    ap.add_argument("--out", type=str, default=None, help="Output PDF (default out/bingo_cards.pdf).")
    ap.add_argument("--card", type=str, default=None, help="Render only this card id (single-card PDF).")
    ap.add_argument("--icons", type=str, default="icons", help="Directory of <label-slug>.svg icons.")
    ap.add_argument("--logo", type=str, default=None, help="Optional sponsor logo SVG for the FREE cell.")
    args = ap.parse_args()

    try:
        pack = pack_from_dict(read_json(Path(args.pack)))
    except ValueError as e:
        raise SystemExit(str(e)) from e

    cards = None
    if args.card:
        card = pack.card_by_id(args.card)
        if card is None:
            raise SystemExit(f"Card {args.card} not found in {args.pack}")
        cards = [card]

    if args.out:
        out_pdf = Path(args.out)
    elif args.card:
        out_pdf = Path("out") / f"{sanitize_filename(pack.title or '')}-{args.card}.pdf"
    else:
        out_pdf = Path("out") / "bingo_cards.pdf"

    icons_dir = Path(args.icons)
    n = render_pack_pdf(
        pack,
        out_pdf,
        cards=cards,
        icons_dir=icons_dir if icons_dir.is_dir() else None,
        logo_svg=Path(args.logo) if args.logo else None,
    )
    print(f"Wrote {n} card(s) to {out_pdf}")


if __name__ == "__main__":
    main()
