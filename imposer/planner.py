"""
Планировщик порядка страниц по тетрадям
"""
import logging
from typing import Callable, Dict, List, Tuple

from .exceptions import InvalidConfiguration
from .models import (
    Arrangement, ArrangementKind, BindingType, PagePlan, PageSlotAssignment, SheetSide
)

logger = logging.getLogger(__name__)

# Ячейка сетки: (номер страницы в тетради с 1, поворот на 180°)
Cell = Tuple[int, bool]
Grid = List[List[Cell]]
SheetOrder = Tuple[Grid, Grid]

# Традиционные схемы спуска полос. Строка 0 сверху листа.
# Оборот записан так, как он лежит за лицевой стороной при взгляде спереди.
QUARTO_FRONT = [[(5, True), (4, True)],
                [(8, False), (1, False)]]
QUARTO_BACK = [[(6, True), (3, True)],
               [(7, False), (2, False)]]

OCTAVO_FRONT = [[(5, True), (12, True), (9, True), (8, True)],
                [(4, False), (13, False), (16, False), (1, False)]]
OCTAVO_BACK = [[(6, True), (11, True), (10, True), (7, True)],
               [(3, False), (14, False), (15, False), (2, False)]]

FOLDED_TABLES = {
    ArrangementKind.QUARTO: (QUARTO_FRONT, QUARTO_BACK),
    ArrangementKind.OCTAVO: (OCTAVO_FRONT, OCTAVO_BACK),
}


def grid_shape(arrangement: Arrangement) -> Tuple[int, int]:
    """(колонки, строки) одной стороны листа в канонической раскладке"""
    if arrangement.kind is ArrangementKind.QUARTO:
        return 2, 2
    if arrangement.kind is ArrangementKind.OCTAVO:
        return 4, 2
    return 2, 1


def _mirror(grid: Grid) -> Grid:
    # при двусторонней печати оборот переворачивается по длинной стороне
    return [list(reversed(row)) for row in grid]


def _signature_order(arrangement: Arrangement) -> List[SheetOrder]:
    n = arrangement.pages_per_signature
    if arrangement.is_nested:
        sheets = []
        for k in range(n // 4):
            front = [[(n - 2 * k, False), (1 + 2 * k, False)]]
            back = [[(2 + 2 * k, False), (n - 1 - 2 * k, False)]]
            sheets.append((front, back))
        return sheets

    front, back = FOLDED_TABLES[arrangement.kind]
    return [([list(row) for row in front], _mirror(back))]


def _straight_order(arrangement: Arrangement) -> List[SheetOrder]:
    cols, rows = grid_shape(arrangement)
    sheets = []
    number = 1
    for _ in range(arrangement.sheets_per_signature):
        sides = []
        for _side in (SheetSide.FRONT, SheetSide.BACK):
            grid = []
            for _row in range(rows):
                grid.append([(number + c, False) for c in range(cols)])
                number += cols
            sides.append(grid)
        sheets.append((sides[0], sides[1]))
    return sheets


ORDERING_RULES: Dict[BindingType, Callable[[Arrangement], List[SheetOrder]]] = {
    BindingType.SIGNATURE: _signature_order,
    BindingType.PERFECT: _straight_order,
    BindingType.SIDE_STITCH: _straight_order,
    BindingType.SPIRAL: _straight_order,
    BindingType.CASE_BINDING: _straight_order,
}

_unhandled = set(BindingType) - set(ORDERING_RULES)
if _unhandled:
    raise TypeError(f"No ordering rule for binding types: {sorted(b.value for b in _unhandled)}")


def signature_order(arrangement: Arrangement, binding_type: BindingType) -> List[SheetOrder]:
    return ORDERING_RULES[binding_type](arrangement)


def plan(total_pages: int, arrangement: Arrangement, binding_type: BindingType) -> PagePlan:
    """Раскладывает страницы документа по листам, сторонам и слотам.

    Документ дополняется пустыми страницами до кратного размеру тетради,
    пустые страницы всегда идут в конце логического потока.
    """
    n = arrangement.pages_per_signature
    if n <= 0 or n % 4 != 0:
        raise InvalidConfiguration(f"Arrangement size must be a positive multiple of 4, got {n}")
    if total_pages < 0:
        raise InvalidConfiguration(f"Page count must not be negative, got {total_pages}")

    cols, rows = grid_shape(arrangement)
    signature_count = (total_pages + n - 1) // n
    order = signature_order(arrangement, binding_type)

    assignments = []
    for signature_index in range(signature_count):
        offset = signature_index * n
        for sheet_in_signature, (front, back) in enumerate(order):
            for side, grid in ((SheetSide.FRONT, front), (SheetSide.BACK, back)):
                for row, cells in enumerate(grid):
                    for col, (number, rotated) in enumerate(cells):
                        global_index = offset + number - 1
                        page_index = global_index if global_index < total_pages else None
                        assignments.append(PageSlotAssignment(
                            signature_index, sheet_in_signature, side, row, col,
                            page_index, rotated))

    result = PagePlan(total_pages, n, signature_count, arrangement.sheets_per_signature,
                      cols, rows, tuple(assignments))
    logger.debug(f"Planned {total_pages} pages into {signature_count} signatures "
                 f"({binding_type.value}, {arrangement.kind.value}), "
                 f"{result.blank_pages_added} blanks added")
    return result
