"""
Источник сведений о страницах исходного документа
"""
import logging
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import fitz  # PyMuPDF

from .exceptions import InvalidGeometry

logger = logging.getLogger(__name__)


def as_path_list(source_files) -> List[Path]:
    """Один путь или список путей -> список Path"""
    if isinstance(source_files, (str, Path)):
        return [Path(source_files)]
    return [Path(p) for p in source_files]


class PdfSourceDocument:
    """Читает количество и размеры страниц PDF (в пунктах).

    Размер страницы берётся из ``page.rect``: видимая область (CropBox,
    ограниченный MediaBox) с учётом /Rotate. Сборщик PDF измеряет
    страницы так же.
    """

    def __init__(self, path):
        self.path = Path(path)
        with fitz.open(str(self.path)) as doc:
            self._dimensions = [(page.rect.width, page.rect.height) for page in doc]
        logger.info(f"Открыт документ {self.path.name}: {len(self._dimensions)} стр.")

    def page_count(self) -> int:
        return len(self._dimensions)

    def page_dimensions(self, index: int) -> Tuple[float, float]:
        return self._dimensions[index]


class StaticSourceDocument:
    """Размеры страниц, заданные заранее (статистика, предпросмотр, тесты)"""

    def __init__(self, dimensions: Sequence[Tuple[float, float]]):
        self._dimensions = [tuple(d) for d in dimensions]

    @classmethod
    def uniform(cls, page_count: int, width: float = 612.0, height: float = 792.0):
        return cls([(width, height)] * page_count)

    def page_count(self) -> int:
        return len(self._dimensions)

    def page_dimensions(self, index: int) -> Tuple[float, float]:
        return self._dimensions[index]


class MultiSourceDocument:
    """Несколько документов, склеенных в одну последовательность страниц"""

    def __init__(self, sources):
        self.sources = list(sources)
        self._offsets = []
        total = 0
        for source in self.sources:
            self._offsets.append(total)
            total += source.page_count()
        self._total = total

    def page_count(self) -> int:
        return self._total

    def locate(self, index: int) -> Tuple[int, int]:
        """(номер документа, номер страницы в нём) для сквозного номера"""
        if not 0 <= index < self._total:
            raise IndexError(f"page {index} out of range 0..{self._total - 1}")
        for number in range(len(self.sources) - 1, -1, -1):
            if index >= self._offsets[number]:
                return number, index - self._offsets[number]
        raise IndexError(index)

    def page_dimensions(self, index: int) -> Tuple[float, float]:
        number, local = self.locate(index)
        return self.sources[number].page_dimensions(local)


def open_sources(source_files: Union[str, Path, Sequence]) -> Union[PdfSourceDocument, MultiSourceDocument]:
    """Один PDF или склейка нескольких PDF в порядке перечисления"""
    paths = as_path_list(source_files)
    if len(paths) == 1:
        return PdfSourceDocument(paths[0])
    source = MultiSourceDocument(PdfSourceDocument(path) for path in paths)
    logger.info(f"Склеено документов: {len(paths)}, всего {source.page_count()} стр.")
    return source


def collect_dimensions(source) -> List[Tuple[float, float]]:
    """Размеры всех страниц; страница с неположительным размером: ошибка"""
    dimensions = []
    for index in range(source.page_count()):
        width, height = source.page_dimensions(index)
        if width <= 0 or height <= 0:
            raise InvalidGeometry(
                f"Source page reports non-positive dimensions {width}x{height}",
                page_index=index)
        dimensions.append((width, height))
    return dimensions
