#gb_utils.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json
import re


GRID_SIZES = (3, 4, 5)
MAX_QUANTITY = 500

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_FILENAME_RE = re.compile(r"[^\w\- ]+")


def label_slug(label: str) -> str:
    """Icon file stem for a bingo label: 'Cal-Mag' -> 'cal-mag'."""
    return _SLUG_RE.sub("-", label.strip().lower()).strip("-")


def sanitize_filename(name: str, default: str = "bingo-card") -> str:
    s = _FILENAME_RE.sub("", name or "").strip()
    s = re.sub(r"\s+", "_", s)[:120]
    return s or default


def icon_path_for_label(icons_dir: Path | None, label: str) -> Path | None:
    """Return icons/<slug>.svg for a label, or None when there is no icon."""
    if icons_dir is None:
        return None
    slug = label_slug(label)
    if not slug:
        return None
    p = icons_dir / f"{slug}.svg"
    if p.is_file():
        return p
    return None


def read_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ValueError(f"Failed to read JSON: {path} ({e})") from e


def write_json(path: Path, obj: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


@dataclass(frozen=True)
class PackConfig:
    quantity: int = 25
    grid_size: int = 5
    seed: int | None = None
    max_quantity: int = MAX_QUANTITY
    max_attempts: int | None = None
    title: str = "Harvest Heroes Bingo"
    sponsor_name: str = ""

    @property
    def cells(self) -> int:
        return int(self.grid_size) * int(self.grid_size)


@dataclass(frozen=True)
class CallerConfig:
    deck_size: int | None = None
    draw_size: int = 10


@dataclass(frozen=True)
class BingoConfig:
    pack: PackConfig
    caller: CallerConfig


def _opt_int(v: object) -> int | None:
    if v is None:
        return None
    return int(v)


def parse_pack_config(cfg: dict) -> PackConfig:
    p = cfg.get("pack") or {}
    quantity = int(p.get("quantity", 25))
    grid_size = int(p.get("grid_size", 5))
    seed = _opt_int(p.get("seed"))
    max_quantity = int(p.get("max_quantity", MAX_QUANTITY))
    max_attempts = _opt_int(p.get("max_attempts"))
    title = str(p.get("title") or "Harvest Heroes Bingo")
    sponsor_name = str(p.get("sponsor_name") or "")

    if grid_size not in GRID_SIZES:
        raise ValueError(f"grid_size must be one of {GRID_SIZES}. Got {grid_size}.")
    if max_quantity <= 0:
        raise ValueError("max_quantity must be > 0")
    if quantity <= 0 or quantity > max_quantity:
        raise ValueError(f"quantity must be in 1..{max_quantity}. Got {quantity}.")
    if seed is not None and seed < 0:
        raise ValueError("seed must be >= 0")
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    return PackConfig(
        quantity=quantity,
        grid_size=grid_size,
        seed=seed,
        max_quantity=max_quantity,
        max_attempts=max_attempts,
        title=title,
        sponsor_name=sponsor_name,
    )


def parse_caller_config(cfg: dict) -> CallerConfig:
    c = cfg.get("caller") or {}
    deck_size = _opt_int(c.get("deck_size"))
    draw_size = int(c.get("draw_size", 10))
    if deck_size is not None and deck_size <= 0:
        raise ValueError("deck_size must be > 0")
    if draw_size <= 0:
        raise ValueError("draw_size must be > 0")
    return CallerConfig(deck_size=deck_size, draw_size=draw_size)


def parse_bingo_config(cfg: dict) -> BingoConfig:
    return BingoConfig(pack=parse_pack_config(cfg), caller=parse_caller_config(cfg))


def load_bingo_config(path: Path | None) -> BingoConfig:
    """Read config_bingo.json; a missing path means all defaults."""
    if path is None or not path.exists():
        return parse_bingo_config({})
    return parse_bingo_config(read_json(path))


def try_register_unicode_font() -> tuple[str | None, str | None]:
    """Try to register a Unicode-capable TTF for item labels.

    Returns (font_name, warning). If no font is registered, font_name is None and
    warning contains a short message.
    """
    try:
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFont
    except Exception:
        return None, "ReportLab TTFont not available"

    # Convention: user can drop a font file here for portable builds.
    font_path = Path(__file__).resolve().parent / "fonts" / "DejaVuSans.ttf"
    if not font_path.exists():
        return None, "Missing fonts/DejaVuSans.ttf; curly quotes and symbols may not render"

    font_name = "DejaVuSans"
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        return font_name, None
    except Exception as e:
        return None, f"Failed to register {font_path.name}: {e}"
