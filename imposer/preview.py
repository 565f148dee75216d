"""
Предпросмотр раскладки листа (Pillow)
"""
import base64
import logging
from io import BytesIO

from PIL import Image, ImageDraw

from .models import Sheet, SheetSide

logger = logging.getLogger(__name__)

SLOT_OUTLINE = (90, 90, 90)
ROTATED_FILL = (255, 236, 214)
PAGE_FILL = (228, 238, 255)
BLANK_FILL = (245, 245, 245)
MARK_COLOR = (200, 0, 0)


def render_sheet_preview(sheet: Sheet, side: SheetSide = SheetSide.FRONT,
                         max_size: int = 600) -> Image.Image:
    """Рисует схему стороны листа: слоты, номера страниц, метки"""
    face = sheet.face(side)
    if face is None:
        raise ValueError(f"Sheet {sheet.index} has no {side.value} side")

    scale = max_size / max(sheet.width, sheet.height)
    width, height = int(round(sheet.width * scale)), int(round(sheet.height * scale))
    img = Image.new('RGB', (width, height), (255, 255, 255))
    draw = ImageDraw.Draw(img)

    def to_px(x, y):
        # в PDF начало координат снизу
        return x * scale, height - y * scale

    for slot in face.slots:
        x0, y0 = to_px(slot.rect.x, slot.rect.top)
        x1, y1 = to_px(slot.rect.right, slot.rect.y)
        if slot.is_blank:
            fill = BLANK_FILL
        elif slot.rotated:
            fill = ROTATED_FILL
        else:
            fill = PAGE_FILL
        draw.rectangle([x0, y0, x1, y1], fill=fill, outline=SLOT_OUTLINE)

        label = "-" if slot.is_blank else str(slot.page_index + 1)
        if slot.rotated:
            label += " (180)"
        left, top, right, bottom = draw.textbbox((0, 0), label)
        cx, cy = (x0 + x1) / 2, (y0 + y1) / 2
        draw.text((cx - (right - left) / 2, cy - (bottom - top) / 2), label, fill=(0, 0, 0))

    for mark in sheet.marks:
        if mark.side is not side:
            continue
        for x1, y1, x2, y2 in mark.segments:
            draw.line([to_px(x1, y1), to_px(x2, y2)], fill=MARK_COLOR, width=1)
        for cx, cy, r in mark.circles:
            px, py = to_px(cx, cy)
            draw.ellipse([px - r * scale, py - r * scale, px + r * scale, py + r * scale],
                         outline=MARK_COLOR)
        for x, y, w, h in mark.rects:
            px0, py0 = to_px(x, y + h)
            px1, py1 = to_px(x + w, y)
            draw.rectangle([px0, py0, px1, py1], fill=MARK_COLOR)

    logger.debug(f"Preview rendered for sheet {sheet.index} ({side.value}), {width}x{height}px")
    return img


def preview_to_png(img: Image.Image) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


def preview_to_base64(img: Image.Image) -> str:
    return f"data:image/png;base64,{base64.b64encode(preview_to_png(img)).decode()}"
