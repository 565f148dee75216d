"""
Imposer: движок спуска полос для брошюр и книжных блоков
"""

from .models import (
    Unit, BindingType, ArrangementKind, Arrangement, Orientation, PaperType, PaperSpec,
    OutputFormat, ScalingMode, MarkKind, SheetSide, SheetMargins, LeafMargins, Flyleaves,
    Rect, Insets, Transform, PageSlotAssignment, PagePlan, Slot, SheetFace, Sheet, Mark,
    StatisticsReport, ImpositionResult, ValidationResult
)
from .exceptions import ImpositionError, InvalidConfiguration, InvalidGeometry, AssemblyFailure
from .config import ImpositionConfig
from .geometry import place_in_slot
from .planner import plan
from .layout_builder import SheetLayoutBuilder
from .marks import MarkGenerator
from .statistics import calculate_statistics, statistics_from_plan
from .source_document import MultiSourceDocument, PdfSourceDocument, StaticSourceDocument, open_sources
from .pdf_assembler import PDFAssembler
from .imposition_app import ImpositionApp, compute_imposition, compute_statistics

__all__ = [
    'Unit', 'BindingType', 'ArrangementKind', 'Arrangement', 'Orientation', 'PaperType',
    'PaperSpec', 'OutputFormat', 'ScalingMode', 'MarkKind', 'SheetSide', 'SheetMargins',
    'LeafMargins', 'Flyleaves', 'Rect', 'Insets', 'Transform', 'PageSlotAssignment',
    'PagePlan', 'Slot', 'SheetFace', 'Sheet', 'Mark', 'StatisticsReport', 'ImpositionResult',
    'ValidationResult',
    'ImpositionError', 'InvalidConfiguration', 'InvalidGeometry', 'AssemblyFailure',
    'ImpositionConfig',
    'place_in_slot',
    'plan',
    'SheetLayoutBuilder',
    'MarkGenerator',
    'calculate_statistics',
    'statistics_from_plan',
    'PdfSourceDocument',
    'StaticSourceDocument',
    'MultiSourceDocument',
    'open_sources',
    'PDFAssembler',
    'ImpositionApp',
    'compute_imposition',
    'compute_statistics'
]
