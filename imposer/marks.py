"""
Генератор типографских меток
"""
import logging
from typing import Iterable, List

from .models import BindingType, Mark, MarkKind, Sheet, SheetSide

logger = logging.getLogger(__name__)

FOLD_LINE_WIDTH = 0.5
CUT_LINE_WIDTH = 0.5
CROP_MARK_WIDTH = 0.25
REGISTRATION_MARK_WIDTH = 0.25
CROP_MARK_LENGTH = 12.0
CROP_MARK_GAP = 3.0
REGISTRATION_MARK_SIZE = 10.0
SCISSORS_SIZE = 8.0
FOLD_DASH = (6.0, 3.0)
SEWING_STATIONS = 5
SEWING_INSET = 0.1
SEWING_TICK = 4.0
SPINE_MARK_WIDTH = 4.0
SPINE_MARK_HEIGHT = 12.0

# порядок вывода меток не зависит от порядка в наборе
MARK_ORDER = (
    MarkKind.FOLD_LINES,
    MarkKind.CUT_LINES,
    MarkKind.CROP_MARKS,
    MarkKind.REGISTRATION_MARKS,
    MarkKind.SEWING_MARKS,
    MarkKind.SPINE_MARKS,
)


class MarkGenerator:
    def __init__(self, binding_type: BindingType):
        self.binding_type = binding_type

    def marks(self, sheet: Sheet, kinds: Iterable[MarkKind]) -> List[Mark]:
        requested = set(kinds)
        result = []
        for kind in MARK_ORDER:
            if kind not in requested:
                continue
            for face in sheet.faces:
                result.extend(self._derive(kind, sheet, face.side))
        return result

    def _derive(self, kind: MarkKind, sheet: Sheet, side: SheetSide) -> List[Mark]:
        if kind is MarkKind.FOLD_LINES:
            return self._fold_lines(sheet, side)
        if kind is MarkKind.CUT_LINES:
            return self._cut_lines(sheet, side)
        if kind is MarkKind.CROP_MARKS:
            return self._crop_marks(sheet, side)
        if kind is MarkKind.REGISTRATION_MARKS:
            return self._registration_marks(sheet, side)
        if kind is MarkKind.SEWING_MARKS:
            return self._sewing_marks(sheet, side)
        return self._spine_marks(sheet, side)

    def _fold_lines(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        area = sheet.leaf_area
        segments = [(sheet.column_x(c), area.y, sheet.column_x(c), area.top)
                    for c in sheet.fold_columns]
        segments += [(area.x, sheet.row_y(r), area.right, sheet.row_y(r))
                     for r in sheet.fold_rows]
        if not segments:
            return []
        return [Mark(MarkKind.FOLD_LINES, sheet.index, side, segments=tuple(segments),
                     line_width=FOLD_LINE_WIDTH, dash=FOLD_DASH)]

    def _cut_lines(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        area = sheet.leaf_area
        segments = []
        scissors = []
        for c in sheet.cut_columns:
            x = sheet.column_x(c)
            segments.append((x, area.y, x, area.top))
            scissors.append((x, area.top + CROP_MARK_GAP + SCISSORS_SIZE / 2, SCISSORS_SIZE / 2))
        for r in sheet.cut_rows:
            y = sheet.row_y(r)
            segments.append((area.x, y, area.right, y))
            scissors.append((area.x - CROP_MARK_GAP - SCISSORS_SIZE / 2, y, SCISSORS_SIZE / 2))
        if not segments:
            return []
        return [Mark(MarkKind.CUT_LINES, sheet.index, side, segments=tuple(segments),
                     circles=tuple(scissors), line_width=CUT_LINE_WIDTH)]

    def _crop_marks(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        area = sheet.leaf_area
        gap, length = CROP_MARK_GAP, CROP_MARK_LENGTH
        segments = []
        for x, y, sx, sy in ((area.x, area.y, -1, -1), (area.right, area.y, 1, -1),
                             (area.x, area.top, -1, 1), (area.right, area.top, 1, 1)):
            # горизонтальная и вертикальная части уголка за пределами обреза
            segments.append((x + sx * gap, y, x + sx * (gap + length), y))
            segments.append((x, y + sy * gap, x, y + sy * (gap + length)))
        return [Mark(MarkKind.CROP_MARKS, sheet.index, side, segments=tuple(segments),
                     line_width=CROP_MARK_WIDTH)]

    def _registration_marks(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        area = sheet.leaf_area
        offset = CROP_MARK_GAP + REGISTRATION_MARK_SIZE
        half = REGISTRATION_MARK_SIZE / 2
        cx, cy = area.center
        centers = ((cx, area.top + offset), (cx, area.y - offset),
                   (area.x - offset, cy), (area.right + offset, cy))
        result = []
        for x, y in centers:
            result.append(Mark(
                MarkKind.REGISTRATION_MARKS, sheet.index, side,
                segments=((x - half, y, x + half, y), (x, y - half, x, y + half)),
                circles=((x, y, REGISTRATION_MARK_SIZE * 0.35),),
                line_width=REGISTRATION_MARK_WIDTH))
        return result

    def _sewing_marks(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        if not self.binding_type.is_sewn:
            return []
        segments = []
        half = SEWING_TICK / 2
        for c in sheet.spine_columns:
            x = sheet.column_x(c)
            for row in range(sheet.rows):
                top, bottom = sheet.row_y(row), sheet.row_y(row + 1)
                for y in _stations(bottom, top):
                    segments.append((x - half, y, x + half, y))
        for r in sheet.spine_rows:
            y = sheet.row_y(r)
            for x in _stations(sheet.leaf_area.x, sheet.leaf_area.right):
                segments.append((x, y - half, x, y + half))
        if not segments:
            return []
        return [Mark(MarkKind.SEWING_MARKS, sheet.index, side, segments=tuple(segments),
                     line_width=CROP_MARK_WIDTH)]

    def _spine_marks(self, sheet: Sheet, side: SheetSide) -> List[Mark]:
        if not self.binding_type.has_spine or sheet.signature_index is None:
            return []
        if side is not SheetSide.FRONT or sheet.sheet_in_signature:
            return []
        area = sheet.leaf_area
        rects = []
        for c in sheet.spine_columns:
            x = sheet.column_x(c)
            steps = max(1, int(area.height // SPINE_MARK_HEIGHT))
            y = area.top - (sheet.signature_index % steps + 1) * SPINE_MARK_HEIGHT
            rects.append((x - SPINE_MARK_WIDTH / 2, y, SPINE_MARK_WIDTH, SPINE_MARK_HEIGHT))
        for r in sheet.spine_rows:
            y = sheet.row_y(r)
            steps = max(1, int(area.width // SPINE_MARK_HEIGHT))
            x = area.x + (sheet.signature_index % steps) * SPINE_MARK_HEIGHT
            rects.append((x, y - SPINE_MARK_WIDTH / 2, SPINE_MARK_HEIGHT, SPINE_MARK_WIDTH))
        if not rects:
            return []
        return [Mark(MarkKind.SPINE_MARKS, sheet.index, side, rects=tuple(rects),
                     line_width=0.0)]


def _stations(start: float, end: float) -> List[float]:
    length = end - start
    inner_start = start + length * SEWING_INSET
    inner_length = length * (1 - 2 * SEWING_INSET)
    step = inner_length / (SEWING_STATIONS - 1)
    return [inner_start + i * step for i in range(SEWING_STATIONS)]
