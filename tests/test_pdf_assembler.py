# tests/test_pdf_assembler.py
import os
import sys
import tempfile
import unittest
from pathlib import Path

import fitz  # PyMuPDF
from PyPDF2 import PdfReader
from reportlab.pdfgen import canvas

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from imposer.config import ImpositionConfig
from imposer.imposition_app import ImpositionApp, compute_imposition
from imposer.models import Arrangement, ScalingMode, SheetSide
from imposer.source_document import MultiSourceDocument, PdfSourceDocument, StaticSourceDocument, open_sources

RED = (1, 0, 0)
BLUE = (0, 0, 1)


def make_two_tone_pdf(path, pages, crop_box=None, rotation=0):
    """Страницы 612x792: нижняя половина красная, верхняя синяя.

    При crop_box видимая область красная, остальное синее.
    """
    # reportlab при /Rotate 90 меняет местами стороны MediaBox
    size = (792, 612) if rotation in (90, 270) else (612, 792)
    c = canvas.Canvas(str(path), pagesize=size, cropBox=crop_box)
    for _ in range(pages):
        if rotation:
            c.setPageRotation(rotation)
        if crop_box:
            c.setFillColorRGB(*BLUE)
            c.rect(0, 0, 612, 792, stroke=0, fill=1)
            x0, y0, x1, y1 = crop_box
            c.setFillColorRGB(*RED)
            c.rect(x0, y0, x1 - x0, y1 - y0, stroke=0, fill=1)
        else:
            c.setFillColorRGB(*RED)
            c.rect(0, 0, 612, 396, stroke=0, fill=1)
            c.setFillColorRGB(*BLUE)
            c.rect(0, 396, 612, 396, stroke=0, fill=1)
        c.showPage()
    c.save()
    return Path(path)


def make_solid_pdf(path, pages, color):
    c = canvas.Canvas(str(path), pagesize=(612, 792))
    for _ in range(pages):
        c.setFillColorRGB(*color)
        c.rect(0, 0, 612, 792, stroke=0, fill=1)
        c.showPage()
    c.save()
    return Path(path)


def colour_at(pdf_path, page_number, x, y):
    """Цвет точки выходного листа (координаты PDF, начало снизу)"""
    with fitz.open(str(pdf_path)) as doc:
        page = doc[page_number]
        pix = page.get_pixmap()
        r, g, b = pix.pixel(int(x), int(page.rect.height - y))[:3]
    if r > 200 and g < 80 and b < 80:
        return 'red'
    if b > 200 and r < 80 and g < 80:
        return 'blue'
    if min(r, g, b) > 230:
        return 'white'
    return 'other'


class TestPagePlacement(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def impose(self, config, sources):
        result = compute_imposition(config, open_sources(sources))
        written = ImpositionApp(config).process(sources, str(self.dir / 'out.pdf'))
        return result, written[0]

    @staticmethod
    def slot_for(result, page_index, sheet=0, side=SheetSide.FRONT):
        for slot in result.sheets[sheet].face(side).slots:
            if slot.page_index == page_index:
                return slot
        raise AssertionError(f"page {page_index} not on sheet {sheet}")

    @staticmethod
    def placed(slot, source):
        width, height = PdfSourceDocument(source).page_dimensions(slot.page_index)
        return slot.transform.placed_rect(slot.rect, width, height)

    def test_fit_places_page_in_computed_rect(self):
        """Тест fit: страница внутри рассчитанного прямоугольника, поля слота пустые"""
        source = make_two_tone_pdf(self.dir / 'src.pdf', 5)
        result, out = self.impose(ImpositionConfig(), source)
        slot = self.slot_for(result, 0)
        rect = self.placed(slot, source)

        cx = rect.x + rect.width / 2
        self.assertEqual(colour_at(out, 0, cx, rect.y + 3), 'red')
        self.assertEqual(colour_at(out, 0, cx, rect.top - 3), 'blue')
        self.assertEqual(colour_at(out, 0, rect.x + 3, rect.y + 3), 'red')
        self.assertEqual(colour_at(out, 0, rect.right - 3, rect.top - 3), 'blue')
        gap = (rect.x - slot.rect.x) / 2
        self.assertGreater(gap, 5)
        self.assertEqual(colour_at(out, 0, slot.rect.x + gap, rect.y + rect.height / 2), 'white')

    def test_rotated_slot_is_upside_down(self):
        """Тест: в верхнем ряду quarto страница перевёрнута на 180°"""
        source = make_two_tone_pdf(self.dir / 'src.pdf', 5)
        result, out = self.impose(ImpositionConfig(), source)
        rotated = self.slot_for(result, 4)
        upright = self.slot_for(result, 0)
        self.assertTrue(rotated.rotated)
        self.assertFalse(upright.rotated)

        rect = self.placed(rotated, source)
        cx = rect.x + rect.width / 2
        self.assertEqual(colour_at(out, 0, cx, rect.y + rect.height * 0.25), 'blue')
        self.assertEqual(colour_at(out, 0, cx, rect.y + rect.height * 0.75), 'red')
        self.assertEqual(colour_at(out, 0, rect.x + 3, rect.y + 3), 'blue')
        self.assertEqual(colour_at(out, 0, rect.right - 3, rect.top - 3), 'red')

    def test_fill_overflow_is_clipped_to_slot(self):
        """Тест fill: выступающая часть страницы обрезается по границе слота"""
        source = make_two_tone_pdf(self.dir / 'src.pdf', 1)
        config = ImpositionConfig(arrangement=Arrangement.folio(), scaling_mode=ScalingMode.FILL)
        result, out = self.impose(config, source)
        slot = self.slot_for(result, 0)
        rect = self.placed(slot, source)
        self.assertLess(rect.x, slot.rect.x - 10)

        mid_y = slot.rect.y + slot.rect.height / 4
        self.assertEqual(colour_at(out, 0, slot.rect.x + 3, mid_y), 'red')
        self.assertEqual(colour_at(out, 0, slot.rect.x - 5, mid_y), 'white')

    def test_none_overflow_is_clipped_to_slot(self):
        """Тест none: страница в натуральный размер не выходит за слот"""
        source = make_solid_pdf(self.dir / 'src.pdf', 1, RED)
        config = ImpositionConfig(arrangement=Arrangement.folio(), scaling_mode=ScalingMode.NONE)
        result, out = self.impose(config, source)
        slot = self.slot_for(result, 0)

        mid_y = slot.rect.y + slot.rect.height / 2
        self.assertEqual(colour_at(out, 0, slot.rect.x + 3, mid_y), 'red')
        self.assertEqual(colour_at(out, 0, slot.rect.x - 5, mid_y), 'white')

    def test_cropped_source_uses_crop_box(self):
        """Тест: у страницы с CropBox размещается только видимая область"""
        source = make_two_tone_pdf(self.dir / 'src.pdf', 5, crop_box=(36, 36, 576, 756))
        self.assertEqual(PdfSourceDocument(source).page_dimensions(0), (540, 720))
        result, out = self.impose(ImpositionConfig(), source)
        slot = self.slot_for(result, 0)
        rect = self.placed(slot, source)

        for x, y in ((rect.x + 3, rect.y + 3), (rect.right - 3, rect.top - 3),
                     (rect.x + 3, rect.top - 3), (rect.right - 3, rect.y + 3)):
            with self.subTest(x=x, y=y):
                self.assertEqual(colour_at(out, 0, x, y), 'red')
        self.assertEqual(colour_at(out, 0, rect.x - 3, rect.y + rect.height / 2), 'white')
        self.assertEqual(colour_at(out, 0, rect.right + 3, rect.y + rect.height / 2), 'white')

    def test_rotated_source_is_placed_as_displayed(self):
        """Тест: страница с /Rotate 90 размещается так, как она видна"""
        source = make_two_tone_pdf(self.dir / 'src.pdf', 5, rotation=90)
        width, height = PdfSourceDocument(source).page_dimensions(0)
        self.assertGreater(width, height)
        result, out = self.impose(ImpositionConfig(), source)
        slot = self.slot_for(result, 0)
        rect = self.placed(slot, source)
        self.assertGreater(rect.width, rect.height)

        cy = rect.y + rect.height / 2
        # нижняя половина исходника после поворота по часовой стрелке оказывается слева
        self.assertEqual(colour_at(out, 0, rect.x + rect.width * 0.25, cy), 'red')
        self.assertEqual(colour_at(out, 0, rect.x + rect.width * 0.75, cy), 'blue')
        self.assertEqual(colour_at(out, 0, rect.x + rect.width * 0.25, rect.top - 3), 'red')
        self.assertEqual(colour_at(out, 0, rect.right - 3, rect.y + 3), 'blue')


class TestMultipleSources(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_pages_are_concatenated(self):
        """Тест сквозной нумерации страниц нескольких документов"""
        source = MultiSourceDocument([StaticSourceDocument.uniform(3),
                                      StaticSourceDocument([(100, 200), (300, 400)])])

        self.assertEqual(source.page_count(), 5)
        self.assertEqual(source.locate(0), (0, 0))
        self.assertEqual(source.locate(3), (1, 0))
        self.assertEqual(source.page_dimensions(4), (300, 400))
        with self.assertRaises(IndexError):
            source.locate(5)

    def test_empty_documents_are_skipped(self):
        """Тест: пустой документ в середине не сдвигает нумерацию"""
        source = MultiSourceDocument([StaticSourceDocument.uniform(2), StaticSourceDocument([]),
                                      StaticSourceDocument.uniform(1, 100, 100)])

        self.assertEqual(source.page_count(), 3)
        self.assertEqual(source.locate(2), (2, 0))
        self.assertEqual(source.page_dimensions(2), (100, 100))

    def test_process_several_documents(self):
        """Тест сборки из двух PDF: страницы идут подряд"""
        first = make_solid_pdf(self.dir / 'a.pdf', 3, RED)
        second = make_solid_pdf(self.dir / 'b.pdf', 1, BLUE)
        config = ImpositionConfig(arrangement=Arrangement.folio())
        sources = [first, second]

        result = compute_imposition(config, open_sources(sources))
        self.assertEqual(result.statistics.source_page_count, 4)
        self.assertEqual(result.statistics.blank_pages_added, 0)

        written = ImpositionApp(config).process(sources, str(self.dir / 'out.pdf'))
        self.assertEqual(len(PdfReader(str(written[0])).pages), 2)

        front = result.sheets[0].front
        last, first_page = front.slots
        self.assertEqual((last.page_index, first_page.page_index), (3, 0))
        for slot, colour in ((last, 'blue'), (first_page, 'red')):
            with self.subTest(page=slot.page_index):
                cx = slot.rect.x + slot.rect.width / 2
                cy = slot.rect.y + slot.rect.height / 2
                self.assertEqual(colour_at(written[0], 0, cx, cy), colour)


if __name__ == '__main__':
    unittest.main()
