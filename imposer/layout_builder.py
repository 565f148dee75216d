"""
Построение листов: слоты, трансформации, форзацы
"""
import logging
from typing import List, Optional, Sequence, Tuple

from .config import ImpositionConfig
from .exceptions import InvalidConfiguration, InvalidGeometry
from .geometry import place_in_slot
from .models import (
    ArrangementKind, Insets, Orientation, OutputFormat, PagePlan, PageSlotAssignment,
    Rect, Sheet, SheetFace, SheetSide, Slot
)

logger = logging.getLogger(__name__)

PageDimensions = Sequence[Tuple[float, float]]


class SheetLayoutBuilder:
    def __init__(self, config: ImpositionConfig):
        self.config = config
        self.sheet_width, self.sheet_height = config.sheet_size()
        margins = config.sheet_margins
        unit = margins.unit
        self.leaf_area = Rect(
            unit.to_points(margins.left),
            unit.to_points(margins.bottom),
            self.sheet_width - unit.to_points(margins.left + margins.right),
            self.sheet_height - unit.to_points(margins.top + margins.bottom))

    def build(self, plan: PagePlan, page_dimensions: PageDimensions) -> List[Sheet]:
        stacked = (plan.cols == 2 and plan.rows == 1
                   and self.config.orientation is Orientation.PORTRAIT)
        cols, rows = (1, 2) if stacked else (plan.cols, plan.rows)
        structure = self._structure(cols, rows)

        sheets = []
        for _ in range(self.config.flyleaves.front):
            sheets.extend(self._flyleaf(len(sheets), cols, rows, structure))

        grouped = {}
        for assignment in plan.assignments:
            key = (assignment.signature_index, assignment.sheet_in_signature)
            grouped.setdefault(key, []).append(assignment)

        for (signature_index, sheet_in_signature) in sorted(grouped):
            assignments = grouped[(signature_index, sheet_in_signature)]
            faces = []
            for side in (SheetSide.FRONT, SheetSide.BACK):
                side_assignments = [a for a in assignments if a.side is side]
                faces.append(self._face(side, side_assignments, cols, rows, stacked,
                                        page_dimensions, len(sheets)))
            if self.config.output_format is OutputFormat.SINGLE_SIDED_SEQUENCE:
                for face in faces:
                    single = SheetFace(SheetSide.FRONT, face.slots)
                    sheets.append(self._sheet(len(sheets), cols, rows, (single,), structure,
                                              signature_index, sheet_in_signature))
            else:
                sheets.append(self._sheet(len(sheets), cols, rows, tuple(faces), structure,
                                          signature_index, sheet_in_signature))

        for _ in range(self.config.flyleaves.back):
            sheets.extend(self._flyleaf(len(sheets), cols, rows, structure))

        self._check_exactly_once(plan, sheets)
        logger.info(f"Built {len(sheets)} sheets ({cols}x{rows} slots per side, "
                    f"{self.sheet_width:.1f}x{self.sheet_height:.1f}pt)")
        return sheets

    def _structure(self, cols: int, rows: int) -> dict:
        """Линии фальцовки, резки и корешка на листе"""
        folding = self.config.binding_type.folds_signatures
        kind = self.config.arrangement.kind
        structure = {'fold_columns': (), 'fold_rows': (), 'cut_columns': (), 'cut_rows': ()}

        if cols > 1:
            spine_columns = tuple(range(1, cols, 2))
            spine_rows = ()
        else:
            spine_columns = ()
            spine_rows = (1,)

        if folding:
            structure['fold_columns'] = spine_columns
            structure['fold_rows'] = spine_rows
            if kind in (ArrangementKind.QUARTO, ArrangementKind.OCTAVO):
                structure['fold_rows'] = (1,)
            if kind is ArrangementKind.OCTAVO:
                structure['cut_columns'] = (2,)
        else:
            structure['cut_columns'] = tuple(range(1, cols))
            structure['cut_rows'] = tuple(range(1, rows))

        structure['spine_columns'] = spine_columns
        structure['spine_rows'] = spine_rows
        return structure

    def _sheet(self, index: int, cols: int, rows: int, faces: Tuple[SheetFace, ...],
               structure: dict, signature_index: Optional[int] = None,
               sheet_in_signature: Optional[int] = None, is_flyleaf: bool = False) -> Sheet:
        return Sheet(index, self.sheet_width, self.sheet_height, self.leaf_area, cols, rows,
                     faces, signature_index, sheet_in_signature, is_flyleaf, **structure)

    def _flyleaf(self, index: int, cols: int, rows: int, structure: dict) -> List[Sheet]:
        sides = [SheetSide.FRONT]
        if self.config.output_format is not OutputFormat.SINGLE_SIDED_SEQUENCE:
            sides.append(SheetSide.BACK)
        faces = []
        for side in sides:
            slots = []
            for row in range(rows):
                for col in range(cols):
                    slots.append(Slot(row * cols + col, row, col, self._slot_rect(row, col, cols, rows),
                                      margins=self._leaf_insets(row, col, cols, False)))
            faces.append(SheetFace(side, tuple(slots)))
        return [self._sheet(index, cols, rows, tuple(faces), structure, is_flyleaf=True)]

    def _face(self, side: SheetSide, assignments: List[PageSlotAssignment],
              cols: int, rows: int, stacked: bool,
              page_dimensions: PageDimensions, sheet_index: int) -> SheetFace:
        slots = []
        for assignment in assignments:
            if stacked:
                row, col = assignment.col, 0
            else:
                row, col = assignment.row, assignment.col
            slot_index = row * cols + col
            rect = self._slot_rect(row, col, cols, rows)
            insets = self._leaf_insets(row, col, cols, assignment.rotated)

            transform = None
            if not assignment.is_blank:
                width, height = self._dimensions(page_dimensions, assignment.page_index, sheet_index)
                try:
                    transform = place_in_slot(width, height, rect.width, rect.height,
                                              self.config.scaling_mode, insets,
                                              assignment.rotated, assignment.page_index)
                except InvalidGeometry as e:
                    raise InvalidGeometry(e.message, page_index=assignment.page_index,
                                          sheet_index=sheet_index, slot_index=slot_index) from e

            slots.append(Slot(slot_index, row, col, rect, assignment.page_index,
                              assignment.rotated, transform, insets))

        slots.sort(key=lambda slot: slot.index)
        return SheetFace(side, tuple(slots))

    @staticmethod
    def _dimensions(page_dimensions: PageDimensions, page_index: int,
                    sheet_index: int) -> Tuple[float, float]:
        try:
            width, height = page_dimensions[page_index]
        except IndexError:
            raise InvalidGeometry("No dimensions reported for page",
                                  page_index=page_index, sheet_index=sheet_index)
        return width, height

    def _slot_rect(self, row: int, col: int, cols: int, rows: int) -> Rect:
        cell_width = self.leaf_area.width / cols
        cell_height = self.leaf_area.height / rows
        return Rect(self.leaf_area.x + col * cell_width,
                    self.leaf_area.top - (row + 1) * cell_height,
                    cell_width, cell_height)

    def _leaf_insets(self, row: int, col: int, cols: int, rotated: bool) -> Insets:
        margins = self.config.leaf_margins
        to_points = margins.unit.to_points
        head, tail = to_points(margins.top), to_points(margins.bottom)
        spine, fore_edge = to_points(margins.spine), to_points(margins.fore_edge)

        if cols > 1:
            # корешок на стороне соседней полосы пары (2j, 2j+1)
            left, right = (fore_edge, spine) if col % 2 == 0 else (spine, fore_edge)
            top, bottom = (tail, head) if rotated else (head, tail)
        else:
            # полосы одна над другой: корешок на линии сгиба, голова и хвост снаружи
            left = right = fore_edge
            top, bottom = (head, spine) if row == 0 else (spine, tail)
        return Insets(top, right, bottom, left)

    @staticmethod
    def _check_exactly_once(plan: PagePlan, sheets: List[Sheet]):
        placed = sorted(slot.page_index
                        for sheet in sheets
                        for face in sheet.faces
                        for slot in face.slots
                        if slot.page_index is not None)
        if placed != list(range(plan.total_pages)):
            raise InvalidConfiguration(
                f"Layout placed {len(placed)} pages, expected each of {plan.total_pages} exactly once")


def build(plan: PagePlan, config: ImpositionConfig, page_dimensions: PageDimensions) -> List[Sheet]:
    return SheetLayoutBuilder(config).build(plan, page_dimensions)
