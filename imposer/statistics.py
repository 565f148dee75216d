"""
Подсчёт статистики импозиции
"""
import logging
from typing import Sequence

from .config import ImpositionConfig
from .models import OutputFormat, PagePlan, Sheet, StatisticsReport

logger = logging.getLogger(__name__)


def calculate_statistics(plan: PagePlan, sheets: Sequence[Sheet]) -> StatisticsReport:
    """Один проход по построенным листам"""
    sheet_count = 0
    flyleaf_count = 0
    face_count = 0
    blank_slots = 0
    for sheet in sheets:
        sheet_count += 1
        face_count += len(sheet.faces)
        if sheet.is_flyleaf:
            flyleaf_count += 1
            continue
        for face in sheet.faces:
            blank_slots += sum(1 for slot in face.slots if slot.is_blank)

    return StatisticsReport(
        source_page_count=plan.total_pages,
        output_sheet_count=sheet_count,
        signature_count=plan.signature_count,
        blank_pages_added=blank_slots,
        flyleaf_sheet_count=flyleaf_count,
        padded_page_count=plan.padded_page_count,
        output_page_count=face_count,
        pages_per_signature=plan.pages_per_signature,
    )


def statistics_from_plan(plan: PagePlan, config: ImpositionConfig) -> StatisticsReport:
    """Статистика без построения геометрии листов"""
    flyleaves = config.flyleaves.front + config.flyleaves.back
    if config.output_format is OutputFormat.SINGLE_SIDED_SEQUENCE:
        content_sheets = plan.sheet_count * 2
        faces = content_sheets + flyleaves
    else:
        content_sheets = plan.sheet_count
        faces = (content_sheets + flyleaves) * 2

    report = StatisticsReport(
        source_page_count=plan.total_pages,
        output_sheet_count=content_sheets + flyleaves,
        signature_count=plan.signature_count,
        blank_pages_added=plan.blank_pages_added,
        flyleaf_sheet_count=flyleaves,
        padded_page_count=plan.padded_page_count,
        output_page_count=faces,
        pages_per_signature=plan.pages_per_signature,
    )
    logger.debug(f"Stats-only: {report.to_dict()}")
    return report
