"""
Главный класс приложения для импозиции
"""
import dataclasses
import json
import logging
from pathlib import Path
from typing import List, Optional

from .config import ImpositionConfig
from .layout_builder import SheetLayoutBuilder
from .marks import MarkGenerator
from .models import ImpositionResult, StatisticsReport
from .pdf_assembler import PDFAssembler
from .planner import plan
from .source_document import as_path_list, collect_dimensions, open_sources
from .statistics import calculate_statistics, statistics_from_plan

logger = logging.getLogger(__name__)


def compute_imposition(config: ImpositionConfig, source) -> ImpositionResult:
    """plan → layout → marks → stats для одного значения конфигурации"""
    config.validate()
    dimensions = collect_dimensions(source)
    page_plan = plan(len(dimensions), config.arrangement, config.binding_type)
    sheets = SheetLayoutBuilder(config).build(page_plan, dimensions)

    if config.marks:
        generator = MarkGenerator(config.binding_type)
        sheets = [dataclasses.replace(sheet, marks=tuple(generator.marks(sheet, config.marks)))
                  for sheet in sheets]

    statistics = calculate_statistics(page_plan, sheets)
    return ImpositionResult(page_plan, tuple(sheets), statistics)


def compute_statistics(config: ImpositionConfig, page_count: int) -> StatisticsReport:
    """Только статистика: без геометрии листов и без сборки документа"""
    config.validate()
    page_plan = plan(page_count, config.arrangement, config.binding_type)
    return statistics_from_plan(page_plan, config)


class ImpositionApp:
    def __init__(self, config: Optional[ImpositionConfig] = None):
        self.config = config or ImpositionConfig()
        self.logger = logging.getLogger(__name__)

    def compute(self, source) -> ImpositionResult:
        return compute_imposition(self.config, source)

    def statistics(self, page_count: int) -> StatisticsReport:
        return compute_statistics(self.config, page_count)

    def process(self, source_files, output_file: str) -> List[Path]:
        """source_files: путь к PDF или список путей; страницы склеиваются по порядку"""
        source_paths = as_path_list(source_files)
        self.logger.info(f"Начало обработки ({len(source_paths)} файл(ов)), выходной файл: {output_file}")

        source = open_sources(source_paths)
        result = self.compute(source)
        stats = result.statistics
        self.logger.info(
            f"Страниц: {stats.source_page_count}, тетрадей: {stats.signature_count}, "
            f"листов: {stats.output_sheet_count}, пустых страниц: {stats.blank_pages_added}")

        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        written = PDFAssembler(self.config).assemble(result, source_paths, output_path)
        self.logger.info(f"✅ PDF успешно создан: {', '.join(str(p) for p in written)}")
        return written

    def save_config(self, config_file: str):
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(self.config.to_dict(), f, indent=2, ensure_ascii=False)

        self.logger.info(f"Конфигурация сохранена: {config_file}")

    def load_config(self, config_file: str):
        with open(config_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.config = ImpositionConfig.from_dict(data)
        self.config.validate()
        self.logger.info(f"Конфигурация загружена: {config_file}")
