"""
Геометрия размещения страницы в слоте
"""
import logging
from typing import Optional

from .exceptions import InvalidGeometry
from .models import Insets, Rect, ScalingMode, Transform

logger = logging.getLogger(__name__)


def usable_rect(slot_rect: Rect, margins: Optional[Insets] = None) -> Rect:
    if margins is None:
        return slot_rect
    return Rect(slot_rect.x + margins.left,
                slot_rect.y + margins.bottom,
                slot_rect.width - margins.left - margins.right,
                slot_rect.height - margins.top - margins.bottom)


def place_in_slot(page_width: float, page_height: float,
                  slot_width: float, slot_height: float,
                  mode: ScalingMode, margins: Optional[Insets] = None,
                  rotated: bool = False, page_index: Optional[int] = None) -> Transform:
    """Вычисляет масштаб и смещение страницы внутри слота.

    Поля сначала уменьшают полезную область слота, затем применяется режим
    масштабирования. Смещения отсчитываются от левого нижнего угла слота,
    содержимое центрируется по обеим осям.
    """
    if page_width <= 0 or page_height <= 0:
        raise InvalidGeometry(
            f"Page has non-positive dimensions {page_width}x{page_height}",
            page_index=page_index)

    area = usable_rect(Rect(0.0, 0.0, slot_width, slot_height), margins)
    if area.width <= 0 or area.height <= 0:
        raise InvalidGeometry(
            f"Margins leave no usable area in a {slot_width:.2f}x{slot_height:.2f}pt slot",
            page_index=page_index)

    scale_x = area.width / page_width
    scale_y = area.height / page_height

    if mode is ScalingMode.FIT:
        sx = sy = min(scale_x, scale_y)
    elif mode is ScalingMode.FILL:
        sx = sy = max(scale_x, scale_y)
    elif mode is ScalingMode.NONE:
        sx = sy = 1.0
    elif mode is ScalingMode.STRETCH:
        sx, sy = scale_x, scale_y
    else:
        raise InvalidGeometry(f"Unknown scaling mode: {mode}", page_index=page_index)

    dx = area.x + (area.width - page_width * sx) / 2
    dy = area.y + (area.height - page_height * sy) / 2

    return Transform(sx, sy, dx, dy, 180 if rotated else 0)
