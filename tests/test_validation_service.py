# tests/test_validation_service.py
import os
import sys
import tempfile
import unittest
from pathlib import Path

from reportlab.pdfgen import canvas

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from imposer.config import ImpositionConfig
from imposer.models import Arrangement
from services.validation_service import ValidationService


def make_pdf(path, sizes):
    c = canvas.Canvas(str(path))
    for size in sizes:
        c.setPageSize(size)
        c.drawString(50, 50, "x")
        c.showPage()
    c.save()
    return path


class TestValidationService(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.service = ValidationService()

    def tearDown(self):
        self.tmp.cleanup()

    def test_valid_document(self):
        """Тест корректного документа без предупреждений"""
        path = make_pdf(self.dir / 'ok.pdf', [(612, 792)] * 8)
        result = self.service.validate_source(path, ImpositionConfig())

        self.assertTrue(result.is_valid)
        self.assertEqual(result.warnings, [])
        self.assertIn('✅', result.get_report())

    def test_padding_and_mixed_sizes_are_warnings(self):
        """Тест предупреждений о пустых страницах и разных размерах"""
        path = make_pdf(self.dir / 'mixed.pdf', [(612, 792)] * 5 + [(595, 842)])
        result = self.service.validate_source(path, ImpositionConfig(arrangement=Arrangement.folio()))

        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 2)

    def test_missing_and_empty_files(self):
        """Тест отсутствующего и пустого файла"""
        missing = self.service.validate_source(self.dir / 'none.pdf', ImpositionConfig())
        self.assertFalse(missing.is_valid)

        empty = self.dir / 'empty.pdf'
        empty.write_bytes(b'')
        self.assertFalse(self.service.validate_source(empty, ImpositionConfig()).is_valid)

    def test_several_files_checked_together(self):
        """Тест проверки нескольких файлов: страницы считаются вместе"""
        first = make_pdf(self.dir / 'a.pdf', [(612, 792)] * 6)
        second = make_pdf(self.dir / 'b.pdf', [(612, 792)] * 2)
        result = self.service.validate_sources([first, second], ImpositionConfig())

        self.assertTrue(result.is_valid)
        self.assertEqual(result.warnings, [])

        broken = self.service.validate_sources([first, self.dir / 'none.pdf'], ImpositionConfig())
        self.assertFalse(broken.is_valid)
        self.assertEqual(len(broken.errors), 1)

    def test_corrupted_file(self):
        """Тест повреждённого PDF"""
        broken = self.dir / 'broken.pdf'
        broken.write_bytes(b'%PDF-1.4 this is not really a pdf')
        result = self.service.validate_source(broken, ImpositionConfig())

        self.assertFalse(result.is_valid)
        self.assertIn('ОШИБКИ', result.get_report())


if __name__ == '__main__':
    unittest.main()
