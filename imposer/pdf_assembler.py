"""
Сборка выходного PDF по рассчитанным листам
"""
import logging
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

from PyPDF2 import PageObject, PdfReader, PdfWriter, Transformation
from PyPDF2.generic import RectangleObject
from reportlab.pdfgen import canvas

from .config import ImpositionConfig
from .exceptions import AssemblyFailure, ImpositionError
from .models import ImpositionResult, OutputFormat, Rect, Sheet, SheetFace, SheetSide, Slot
from .source_document import as_path_list

logger = logging.getLogger(__name__)


class PDFAssembler:
    def __init__(self, config: ImpositionConfig):
        self.config = config

    def assemble(self, result: ImpositionResult, source_files, output_path) -> List[Path]:
        """Собирает листы в PDF; source_files: один путь или список (страницы склеиваются)"""
        output_path = Path(output_path)
        logger.info(f"Начало сборки PDF: {output_path}")
        source_pages = self._source_pages(as_path_list(source_files))

        if not result.sheets:
            raise AssemblyFailure("Nothing to assemble: layout has no sheets")

        overlays = self._render_marks(result.sheets)

        fronts = PdfWriter()
        backs = PdfWriter()
        combined = PdfWriter()
        overlay_index = 0
        for sheet in result.sheets:
            for face in sheet.faces:
                try:
                    page = self._compose_face(source_pages, sheet, face)
                    if overlays is not None and sheet.marks:
                        page.merge_page(overlays.pages[overlay_index])
                except ImpositionError:
                    raise
                except Exception as e:
                    raise AssemblyFailure(f"Cannot compose {face.side.value} side: {e}",
                                          sheet_index=sheet.index) from e
                overlay_index += 1
                combined.add_page(page)
                if face.side is SheetSide.FRONT:
                    fronts.add_page(page)
                else:
                    backs.add_page(page)

        if self.config.output_format is OutputFormat.TWO_SIDED:
            front_path = output_path.with_name(f"{output_path.stem}_front.pdf")
            back_path = output_path.with_name(f"{output_path.stem}_back.pdf")
            written = [self._write(fronts, front_path), self._write(backs, back_path)]
        else:
            written = [self._write(combined, output_path)]

        logger.info(f"PDF собран: {', '.join(str(p) for p in written)}")
        return written

    @staticmethod
    def _source_pages(paths: List[Path]) -> List[PageObject]:
        pages = []
        for path in paths:
            try:
                reader = PdfReader(str(path))
                pages.extend(reader.pages)
            except Exception as e:
                raise AssemblyFailure(f"Cannot read source document {path}: {e}") from e
        return pages

    def _compose_face(self, source_pages: List[PageObject], sheet: Sheet, face: SheetFace) -> PageObject:
        page = PageObject.create_blank_page(width=sheet.width, height=sheet.height)
        for slot in face.slots:
            if slot.is_blank:
                continue
            try:
                source = source_pages[slot.page_index]
            except IndexError as e:
                raise AssemblyFailure("Source page is missing", page_index=slot.page_index,
                                      sheet_index=sheet.index, slot_index=slot.index) from e
            self._place(page, source, slot)
        return page

    def _place(self, page: PageObject, source: PageObject, slot: Slot):
        if source.rotation % 360:
            source.transfer_rotation_to_content()
        left, bottom, right, top = visible_box(source)
        width, height = right - left, top - bottom
        placed = slot.transform.placed_rect(slot.rect, width, height)
        clip = _intersection(slot.rect, placed)
        if clip is None:
            logger.warning(f"Страница {slot.page_index + 1} не попадает в слот {slot.index}")
            return

        matrix = slot.transform.pdf_matrix(slot.rect, width, height, (left, bottom))
        source.add_transformation(Transformation(ctm=matrix))
        # merge_page обрезает вставку по TrimBox источника в координатах листа
        source.trimbox = RectangleObject(clip)
        page.merge_page(source)

    def _render_marks(self, sheets) -> Optional[PdfReader]:
        if not any(sheet.marks for sheet in sheets):
            return None
        buffer = BytesIO()
        c = canvas.Canvas(buffer)
        for sheet in sheets:
            for face in sheet.faces:
                c.setPageSize((sheet.width, sheet.height))
                for mark in sheet.marks:
                    if mark.side is face.side:
                        _draw_mark(c, mark)
                c.showPage()
        c.save()
        buffer.seek(0)
        return PdfReader(buffer)

    @staticmethod
    def _write(writer: PdfWriter, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, 'wb') as f:
                writer.write(f)
        except OSError as e:
            raise AssemblyFailure(f"Cannot write {path}: {e}") from e
        return path


def visible_box(page: PageObject) -> Tuple[float, float, float, float]:
    """CropBox, ограниченный MediaBox: та же область, что page.rect в PyMuPDF"""
    media, crop = page.mediabox, page.cropbox
    left = max(float(media.left), float(crop.left))
    bottom = max(float(media.bottom), float(crop.bottom))
    right = min(float(media.right), float(crop.right))
    top = min(float(media.top), float(crop.top))
    return left, bottom, right, top


def _draw_mark(c: canvas.Canvas, mark):
    c.setStrokeColorRGB(0, 0, 0)
    c.setFillColorRGB(0, 0, 0)
    c.setLineWidth(mark.line_width)
    if mark.dash:
        c.setDash(list(mark.dash), 0)
    else:
        c.setDash([], 0)
    for x1, y1, x2, y2 in mark.segments:
        c.line(x1, y1, x2, y2)
    for cx, cy, r in mark.circles:
        c.circle(cx, cy, r, stroke=1, fill=0)
    for x, y, w, h in mark.rects:
        c.rect(x, y, w, h, stroke=0, fill=1)


def _intersection(a: Rect, b: Rect) -> Optional[List[float]]:
    x0, y0 = max(a.x, b.x), max(a.y, b.y)
    x1, y1 = min(a.right, b.right), min(a.top, b.top)
    if x1 <= x0 or y1 <= y0:
        return None
    return [x0, y0, x1, y1]
