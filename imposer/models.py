"""
Data classes и Enum для движка импозиции
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4


class Unit(Enum):
    INCHES = "inches"
    MILLIMETERS = "millimeters"
    POINTS = "points"

    def to_points(self, value: float) -> float:
        if self is Unit.INCHES:
            return value * POINTS_PER_INCH
        if self is Unit.MILLIMETERS:
            return value * POINTS_PER_INCH / MM_PER_INCH
        return float(value)


class BindingType(Enum):
    SIGNATURE = "signature"
    PERFECT = "perfect"
    SIDE_STITCH = "side_stitch"
    SPIRAL = "spiral"
    CASE_BINDING = "case_binding"

    @property
    def folds_signatures(self) -> bool:
        return self is BindingType.SIGNATURE

    @property
    def has_spine(self) -> bool:
        return self in (BindingType.SIGNATURE, BindingType.PERFECT, BindingType.CASE_BINDING)

    @property
    def is_sewn(self) -> bool:
        return self in (BindingType.SIGNATURE, BindingType.CASE_BINDING)


class ArrangementKind(Enum):
    FOLIO = "folio"
    QUARTO = "quarto"
    OCTAVO = "octavo"
    CUSTOM = "custom"


STANDARD_ARRANGEMENT_PAGES = {
    ArrangementKind.FOLIO: 4,
    ArrangementKind.QUARTO: 8,
    ArrangementKind.OCTAVO: 16,
}


@dataclass(frozen=True)
class Arrangement:
    kind: ArrangementKind
    pages_per_signature: int

    @classmethod
    def folio(cls) -> 'Arrangement':
        return cls(ArrangementKind.FOLIO, 4)

    @classmethod
    def quarto(cls) -> 'Arrangement':
        return cls(ArrangementKind.QUARTO, 8)

    @classmethod
    def octavo(cls) -> 'Arrangement':
        return cls(ArrangementKind.OCTAVO, 16)

    @classmethod
    def custom(cls, pages_per_signature: int) -> 'Arrangement':
        return cls(ArrangementKind.CUSTOM, pages_per_signature)

    @classmethod
    def from_name(cls, name: str, pages_per_signature: Optional[int] = None) -> 'Arrangement':
        kind = ArrangementKind(name)
        if kind is ArrangementKind.CUSTOM:
            return cls.custom(int(pages_per_signature or 0))
        return cls(kind, STANDARD_ARRANGEMENT_PAGES[kind])

    @property
    def is_nested(self) -> bool:
        """Тетрадь из вложенных листов по 4 страницы (folio и custom)"""
        return self.kind in (ArrangementKind.FOLIO, ArrangementKind.CUSTOM)

    @property
    def sheets_per_signature(self) -> int:
        if self.is_nested:
            return self.pages_per_signature // 4
        return 1


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class PaperType(Enum):
    LETTER = "letter"
    LEGAL = "legal"
    A4 = "a4"
    A5 = "a5"
    CUSTOM = "custom"


# Стандартные размеры листов (ширина × высота в мм, книжная ориентация)
PAPER_SIZES_MM = {
    PaperType.LETTER: (215.9, 279.4),
    PaperType.LEGAL: (215.9, 355.6),
    PaperType.A4: (210.0, 297.0),
    PaperType.A5: (148.0, 210.0),
}


@dataclass(frozen=True)
class PaperSpec:
    paper_type: PaperType = PaperType.LETTER
    width: Optional[float] = None
    height: Optional[float] = None
    unit: Unit = Unit.MILLIMETERS

    def portrait_points(self) -> Tuple[float, float]:
        if self.paper_type is PaperType.CUSTOM:
            width, height = self.unit.to_points(self.width or 0), self.unit.to_points(self.height or 0)
        else:
            width_mm, height_mm = PAPER_SIZES_MM[self.paper_type]
            width, height = Unit.MILLIMETERS.to_points(width_mm), Unit.MILLIMETERS.to_points(height_mm)
        return min(width, height), max(width, height)

    def dimensions_points(self, orientation: Orientation) -> Tuple[float, float]:
        short, long = self.portrait_points()
        if orientation is Orientation.LANDSCAPE:
            return long, short
        return short, long


class OutputFormat(Enum):
    DOUBLE_SIDED = "double_sided"
    TWO_SIDED = "two_sided"
    SINGLE_SIDED_SEQUENCE = "single_sided_sequence"


class ScalingMode(Enum):
    FIT = "fit"
    FILL = "fill"
    NONE = "none"
    STRETCH = "stretch"


class MarkKind(Enum):
    FOLD_LINES = "fold_lines"
    CUT_LINES = "cut_lines"
    CROP_MARKS = "crop_marks"
    REGISTRATION_MARKS = "registration_marks"
    SEWING_MARKS = "sewing_marks"
    SPINE_MARKS = "spine_marks"


class SheetSide(Enum):
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class SheetMargins:
    top: float = 5.0
    bottom: float = 5.0
    left: float = 5.0
    right: float = 5.0
    unit: Unit = Unit.MILLIMETERS


@dataclass(frozen=True)
class LeafMargins:
    top: float = 0.0
    bottom: float = 0.0
    fore_edge: float = 0.0
    spine: float = 0.0
    unit: Unit = Unit.MILLIMETERS


@dataclass(frozen=True)
class Flyleaves:
    front: int = 0
    back: int = 0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True)
class Insets:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class Transform:
    """Масштаб и смещение страницы относительно начала слота"""
    sx: float
    sy: float
    dx: float
    dy: float
    rotation: int = 0

    def placed_rect(self, slot_rect: Rect, page_width: float, page_height: float) -> Rect:
        return Rect(slot_rect.x + self.dx, slot_rect.y + self.dy,
                    page_width * self.sx, page_height * self.sy)

    def pdf_matrix(self, slot_rect: Rect, page_width: float, page_height: float,
                   origin: Tuple[float, float] = (0.0, 0.0)) -> Tuple[float, float, float, float, float, float]:
        """Матрица (a, b, c, d, e, f) для переноса страницы на лист"""
        placed = self.placed_rect(slot_rect, page_width, page_height)
        ox, oy = origin
        if self.rotation == 180:
            # поворот вокруг центра размещённого прямоугольника
            return (-self.sx, 0.0, 0.0, -self.sy,
                    placed.right + self.sx * ox, placed.top + self.sy * oy)
        return (self.sx, 0.0, 0.0, self.sy,
                placed.x - self.sx * ox, placed.y - self.sy * oy)


@dataclass(frozen=True)
class PageSlotAssignment:
    signature_index: int
    sheet_in_signature: int
    side: SheetSide
    row: int
    col: int
    page_index: Optional[int]
    rotated: bool = False

    @property
    def is_blank(self) -> bool:
        return self.page_index is None


@dataclass(frozen=True)
class PagePlan:
    total_pages: int
    pages_per_signature: int
    signature_count: int
    sheets_per_signature: int
    cols: int
    rows: int
    assignments: Tuple[PageSlotAssignment, ...] = ()

    @property
    def padded_page_count(self) -> int:
        return self.signature_count * self.pages_per_signature

    @property
    def blank_pages_added(self) -> int:
        return self.padded_page_count - self.total_pages

    @property
    def sheet_count(self) -> int:
        return self.signature_count * self.sheets_per_signature

    def assignments_for(self, signature_index: int, sheet_in_signature: int,
                        side: SheetSide) -> List[PageSlotAssignment]:
        return [a for a in self.assignments
                if a.signature_index == signature_index
                and a.sheet_in_signature == sheet_in_signature
                and a.side is side]


@dataclass(frozen=True)
class Slot:
    index: int
    row: int
    col: int
    rect: Rect
    page_index: Optional[int] = None
    rotated: bool = False
    transform: Optional[Transform] = None
    margins: Insets = Insets()

    @property
    def is_blank(self) -> bool:
        return self.page_index is None


@dataclass(frozen=True)
class SheetFace:
    side: SheetSide
    slots: Tuple[Slot, ...]


@dataclass(frozen=True)
class Mark:
    kind: MarkKind
    sheet_index: int
    side: SheetSide
    segments: Tuple[Tuple[float, float, float, float], ...] = ()
    circles: Tuple[Tuple[float, float, float], ...] = ()
    rects: Tuple[Tuple[float, float, float, float], ...] = ()
    line_width: float = 0.25
    dash: Tuple[float, ...] = ()
    slot_index: Optional[int] = None


@dataclass(frozen=True)
class Sheet:
    index: int
    width: float
    height: float
    leaf_area: Rect
    cols: int
    rows: int
    faces: Tuple[SheetFace, ...]
    signature_index: Optional[int] = None
    sheet_in_signature: Optional[int] = None
    is_flyleaf: bool = False
    # границы сетки: колонка/строка i означает линию между i-1 и i
    fold_columns: Tuple[int, ...] = ()
    fold_rows: Tuple[int, ...] = ()
    cut_columns: Tuple[int, ...] = ()
    cut_rows: Tuple[int, ...] = ()
    spine_columns: Tuple[int, ...] = ()
    spine_rows: Tuple[int, ...] = ()
    marks: Tuple[Mark, ...] = ()

    @property
    def front(self) -> SheetFace:
        return self.faces[0]

    @property
    def back(self) -> Optional[SheetFace]:
        return self.faces[1] if len(self.faces) > 1 else None

    @property
    def is_double_sided(self) -> bool:
        return len(self.faces) > 1

    @property
    def cell_width(self) -> float:
        return self.leaf_area.width / self.cols

    @property
    def cell_height(self) -> float:
        return self.leaf_area.height / self.rows

    def column_x(self, boundary: int) -> float:
        return self.leaf_area.x + boundary * self.cell_width

    def row_y(self, boundary: int) -> float:
        """Y границы строки; строка 0 находится сверху листа"""
        return self.leaf_area.top - boundary * self.cell_height

    def face(self, side: SheetSide) -> Optional[SheetFace]:
        for face in self.faces:
            if face.side is side:
                return face
        return None


@dataclass
class StatisticsReport:
    source_page_count: int
    output_sheet_count: int
    signature_count: int
    blank_pages_added: int
    flyleaf_sheet_count: int = 0
    padded_page_count: int = 0
    output_page_count: int = 0
    pages_per_signature: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'source_page_count': self.source_page_count,
            'output_sheet_count': self.output_sheet_count,
            'signature_count': self.signature_count,
            'blank_pages_added': self.blank_pages_added,
            'flyleaf_sheet_count': self.flyleaf_sheet_count,
            'padded_page_count': self.padded_page_count,
            'output_page_count': self.output_page_count,
            'pages_per_signature': self.pages_per_signature,
        }


@dataclass(frozen=True)
class ImpositionResult:
    plan: PagePlan
    sheets: Tuple[Sheet, ...]
    statistics: StatisticsReport


class ValidationResult:
    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.is_valid: bool = True

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def get_report(self) -> str:
        report = []
        if self.errors:
            report.append("ОШИБКИ:")
            for err in self.errors:
                report.append(f"  ❌ {err}")
        if self.warnings:
            report.append("\nПРЕДУПРЕЖДЕНИЯ:")
            for warn in self.warnings:
                report.append(f"  ⚠️ {warn}")
        if self.is_valid and not self.warnings:
            report.append("✅ Документ прошёл проверку успешно")
        return "\n".join(report)
