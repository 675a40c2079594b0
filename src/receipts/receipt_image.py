"""
Receipt Image Generator
=======================

Renders an order receipt as a PNG so the clerk can forward it as a picture
instead of text.

Layout: company header, order/customer lines, item table, totals band,
payment block, footer. Amounts use 'NGN' rather than the naira sign because
the fallback bitmap font has no glyph for it.
"""
from __future__ import annotations

import io
import os
from datetime import datetime
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

import config
from orders.models import Order
from receipts.formatting import format_naira_ascii, format_receipt_date
from settings_store.app_config import AppConfig

# ── Font resolution ──────────────────────────────────────────────
_FONT_CANDIDATES = {
    False: [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/Arial.ttf",
        os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "arial.ttf"),
    ],
    True: [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/Arial Bold.ttf",
        os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "arialbd.ttf"),
    ],
}


def _load_font(size: int, bold: bool = False):
    """Load a TrueType font from the usual system locations, else Pillow's default."""
    for path in _FONT_CANDIDATES[bold]:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


_FONT_TITLE = _load_font(22, bold=True)
_FONT_SUBTITLE = _load_font(13)
_FONT_HEADER = _load_font(12, bold=True)
_FONT_CELL = _load_font(12)
_FONT_CELL_BOLD = _load_font(12, bold=True)
_FONT_FOOTER = _load_font(10)

# Colours
_BG_COLOR = (255, 255, 255)
_HEADER_BG = (20, 83, 45)        # dark green
_HEADER_FG = (255, 255, 255)
_ALT_ROW_BG = (244, 247, 244)
_TOTAL_BG = (220, 252, 231)
_GRID_COLOR = (205, 205, 205)
_TEXT_COLOR = (30, 30, 30)
_SUBTITLE_COLOR = (100, 100, 100)
_BALANCE_COLOR = (200, 30, 30)
_PAID_COLOR = (22, 128, 61)
_FOOTER_COLOR = (160, 160, 160)

# (header, width_px, align)
_COLUMNS = [
    ("S/N",    40, "center"),
    ("SKU",   250, "left"),
    ("PACK",   70, "left"),
    ("QTY",    45, "center"),
    ("PRICE", 100, "right"),
    ("TOTAL", 110, "right"),
]

_PADDING_X = 30
_ROW_HEIGHT = 28
_HEADER_ROW_HEIGHT = 32
_LINE_HEIGHT = 20


def _text_size(draw: ImageDraw.ImageDraw, text: str, font) -> Tuple[float, float]:
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def _centered(draw, text: str, y: float, width: int, font, fill):
    text_w, _ = _text_size(draw, text, font)
    draw.text(((width - text_w) / 2, y), text, fill=fill, font=font)


def _cell(draw, text: str, x: float, y: float, width: int, height: int, align: str, font, fill=_TEXT_COLOR):
    text_w, text_h = _text_size(draw, text, font)
    if align == "center":
        tx = x + (width - text_w) / 2
    elif align == "right":
        tx = x + width - text_w - 6
    else:
        tx = x + 6
    draw.text((tx, y + (height - text_h) / 2), text, fill=fill, font=font)


def _customer_lines(order: Order) -> List[str]:
    lines = [f"Customer: {order.customer.name}"]
    if order.customer.address:
        lines.append(f"Address: {order.customer.address}")
    lines.append(f"Phone: {order.customer.phone}")
    return lines


def _summary_lines(order: Order) -> List[Tuple[str, str, tuple]]:
    method = order.payment_method.value if order.payment_method else ""
    lines = [
        ("Payment Method", method, _TEXT_COLOR),
        ("Amount Paid", format_naira_ascii(order.amount_paid), _TEXT_COLOR),
    ]
    if order.balance > 0:
        lines.append(("Balance Due", format_naira_ascii(order.balance), _BALANCE_COLOR))
    else:
        lines.append(("Status", "PAID IN FULL", _PAID_COLOR))
    return lines


def draw_receipt(order: Order, app_config: AppConfig) -> Image.Image:
    """Lay out the receipt for a completed order on a fresh RGB image."""
    col_widths = [c[1] for c in _COLUMNS]
    table_width = sum(col_widths)
    img_width = table_width + _PADDING_X * 2

    customer_lines = _customer_lines(order)
    summary_lines = _summary_lines(order)

    img_height = (
        20                                   # top margin
        + 30 + _LINE_HEIGHT * 2              # company name, address, phone
        + 12 + 24                            # SALES RECEIPT
        + _LINE_HEIGHT                       # order / date / driver
        + 8 + _LINE_HEIGHT * len(customer_lines)
        + 15 + _HEADER_ROW_HEIGHT
        + _ROW_HEIGHT * len(order.items)
        + _ROW_HEIGHT                        # total row
        + 12 + _LINE_HEIGHT * len(summary_lines)
        + 30 + 20                            # footer, bottom margin
    )

    img = Image.new("RGB", (img_width, img_height), _BG_COLOR)
    draw = ImageDraw.Draw(img)
    y = 20

    # ── Company header ───────────────────────────────────────────
    _centered(draw, app_config.company_name, y, img_width, _FONT_TITLE, _HEADER_BG)
    y += 30
    for text in (app_config.company_address, app_config.company_phone):
        _centered(draw, text, y, img_width, _FONT_SUBTITLE, _SUBTITLE_COLOR)
        y += _LINE_HEIGHT

    y += 12
    _centered(draw, "SALES RECEIPT", y, img_width, _FONT_HEADER, _TEXT_COLOR)
    y += 24

    subtitle = " | ".join([
        f"Order: {order.id}",
        f"Date: {format_receipt_date(order.transaction_date)}",
        f"Driver: {order.driver}",
    ])
    _centered(draw, subtitle, y, img_width, _FONT_SUBTITLE, _SUBTITLE_COLOR)
    y += _LINE_HEIGHT + 8

    for text in customer_lines:
        draw.text((_PADDING_X, y), text, fill=_TEXT_COLOR, font=_FONT_SUBTITLE)
        y += _LINE_HEIGHT
    y += 15

    # ── Table header ─────────────────────────────────────────────
    table_top = y
    draw.rectangle([_PADDING_X, y, _PADDING_X + table_width, y + _HEADER_ROW_HEIGHT], fill=_HEADER_BG)
    x = _PADDING_X
    for header, width, align in _COLUMNS:
        _cell(draw, header, x, y, width, _HEADER_ROW_HEIGHT, align, _FONT_HEADER, _HEADER_FG)
        x += width
    y += _HEADER_ROW_HEIGHT

    # ── Item rows ────────────────────────────────────────────────
    for row_idx, item in enumerate(order.items):
        name = item.sku.name if len(item.sku.name) <= 34 else item.sku.name[:32] + ".."
        cells = [
            str(row_idx + 1),
            name,
            item.sku.pack_type,
            str(item.quantity),
            format_naira_ascii(item.sku.unit_price),
            format_naira_ascii(item.line_total),
        ]
        bg = _ALT_ROW_BG if row_idx % 2 == 1 else _BG_COLOR
        draw.rectangle([_PADDING_X, y, _PADDING_X + table_width, y + _ROW_HEIGHT], fill=bg)
        x = _PADDING_X
        for text, (_, width, align) in zip(cells, _COLUMNS):
            _cell(draw, text, x, y, width, _ROW_HEIGHT, align, _FONT_CELL)
            x += width
        draw.line([_PADDING_X, y + _ROW_HEIGHT, _PADDING_X + table_width, y + _ROW_HEIGHT], fill=_GRID_COLOR, width=1)
        y += _ROW_HEIGHT

    # ── Total row ────────────────────────────────────────────────
    draw.rectangle([_PADDING_X, y, _PADDING_X + table_width, y + _ROW_HEIGHT], fill=_TOTAL_BG)
    label_width = sum(col_widths[:-1])
    _cell(draw, "TOTAL", _PADDING_X, y, label_width, _ROW_HEIGHT, "right", _FONT_CELL_BOLD)
    _cell(draw, format_naira_ascii(order.total), _PADDING_X + label_width, y, col_widths[-1],
          _ROW_HEIGHT, "right", _FONT_CELL_BOLD)
    draw.line([_PADDING_X, y, _PADDING_X + table_width, y], fill=_HEADER_BG, width=2)
    draw.line([_PADDING_X, y + _ROW_HEIGHT, _PADDING_X + table_width, y + _ROW_HEIGHT], fill=_HEADER_BG, width=2)
    y += _ROW_HEIGHT

    # Vertical grid lines
    gx = _PADDING_X
    for w in col_widths:
        draw.line([gx, table_top, gx, y], fill=_GRID_COLOR, width=1)
        gx += w
    draw.line([gx, table_top, gx, y], fill=_GRID_COLOR, width=1)

    # ── Payment block ────────────────────────────────────────────
    y += 12
    for label, value, colour in summary_lines:
        draw.text((_PADDING_X, y), f"{label}:", fill=_TEXT_COLOR, font=_FONT_CELL)
        value_w, _ = _text_size(draw, value, _FONT_CELL_BOLD)
        draw.text((_PADDING_X + table_width - value_w, y), value, fill=colour, font=_FONT_CELL_BOLD)
        y += _LINE_HEIGHT

    # ── Footer ───────────────────────────────────────────────────
    y += 12
    _centered(draw, "Thank you for your business!", y, img_width, _FONT_FOOTER, _FOOTER_COLOR)

    return img


def receipt_png_bytes(order: Order, app_config: AppConfig) -> bytes:
    """PNG receipt held in memory, for serving without touching disk."""
    buffer = io.BytesIO()
    draw_receipt(order, app_config).save(buffer, "PNG", optimize=True)
    return buffer.getvalue()


def render_receipt_image(order: Order, app_config: AppConfig, output_dir: Optional[str] = None) -> str:
    """
    Generate a PNG receipt file for a completed order.

    Args:
        order: Completed order
        app_config: Company name, address and phone for the header
        output_dir: Directory for the image. Defaults to config.TEMP_FOLDER.

    Returns:
        Absolute path to the generated PNG file.
    """
    out_dir = output_dir or config.TEMP_FOLDER or "temp"
    os.makedirs(out_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    img_path = os.path.join(out_dir, f"receipt_{order.id}_{timestamp}.png")
    draw_receipt(order, app_config).save(img_path, "PNG", optimize=True)
    return os.path.abspath(img_path)
