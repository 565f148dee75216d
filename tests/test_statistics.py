# tests/test_statistics.py
import unittest
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from imposer.config import ImpositionConfig
from imposer.layout_builder import build
from imposer.models import Arrangement, BindingType, Flyleaves, OutputFormat
from imposer.planner import plan
from imposer.statistics import calculate_statistics, statistics_from_plan


def both_reports(config, total):
    page_plan = plan(total, config.arrangement, config.binding_type)
    sheets = build(page_plan, config, [(612.0, 792.0)] * total)
    return calculate_statistics(page_plan, sheets), statistics_from_plan(page_plan, config)


class TestStatistics(unittest.TestCase):

    def test_quarto_scenario(self):
        """Тест статистики: 20 страниц, quarto, тетради"""
        built, counted = both_reports(ImpositionConfig(), 20)

        self.assertEqual(built.source_page_count, 20)
        self.assertEqual(built.output_sheet_count, 3)
        self.assertEqual(built.signature_count, 3)
        self.assertEqual(built.blank_pages_added, 4)
        self.assertEqual(built, counted)

    def test_folio_perfect_scenario(self):
        """Тест статистики: 6 страниц, folio, клеевой переплёт"""
        config = ImpositionConfig(binding_type=BindingType.PERFECT, arrangement=Arrangement.folio())
        built, counted = both_reports(config, 6)

        self.assertEqual(built.signature_count, 2)
        self.assertEqual(built.blank_pages_added, 2)
        self.assertEqual(built.padded_page_count, 8)
        self.assertEqual(built, counted)

    def test_flyleaves_counted_as_sheets_not_pages(self):
        """Тест: форзацы входят в число листов, но не страниц"""
        config = ImpositionConfig(flyleaves=Flyleaves(front=2, back=1))
        built, counted = both_reports(config, 8)

        self.assertEqual(built.output_sheet_count, 4)
        self.assertEqual(built.flyleaf_sheet_count, 3)
        self.assertEqual(built.source_page_count, 8)
        self.assertEqual(built.blank_pages_added, 0)
        self.assertEqual(built, counted)

    def test_single_sided_sequence_doubles_sheets(self):
        """Тест: односторонняя последовательность удваивает листы"""
        config = ImpositionConfig(output_format=OutputFormat.SINGLE_SIDED_SEQUENCE,
                                  flyleaves=Flyleaves(front=1))
        built, counted = both_reports(config, 16)

        self.assertEqual(built.output_sheet_count, 5)
        self.assertEqual(built.output_page_count, 5)
        self.assertEqual(built, counted)

    def test_empty_document(self):
        """Тест статистики пустого документа"""
        built, counted = both_reports(ImpositionConfig(flyleaves=Flyleaves(back=1)), 0)

        self.assertEqual(built.signature_count, 0)
        self.assertEqual(built.blank_pages_added, 0)
        self.assertEqual(built.output_sheet_count, 1)
        self.assertEqual(built, counted)

    def test_slots_cover_source_pages(self):
        """Тест: слотов без форзацев ровно столько, сколько страниц с дополнением"""
        for arrangement in (Arrangement.folio(), Arrangement.quarto(),
                            Arrangement.octavo(), Arrangement.custom(12)):
            for total in (1, 7, 16, 29):
                with self.subTest(arrangement=arrangement.kind, total=total):
                    config = ImpositionConfig(arrangement=arrangement,
                                              flyleaves=Flyleaves(front=1, back=1))
                    page_plan = plan(total, arrangement, config.binding_type)
                    sheets = build(page_plan, config, [(612.0, 792.0)] * total)
                    report = calculate_statistics(page_plan, sheets)
                    content = [s for s in sheets if not s.is_flyleaf]
                    slots_per_sheet = sum(len(face.slots) for face in content[0].faces)

                    self.assertEqual(report.output_sheet_count - report.flyleaf_sheet_count,
                                     len(content))
                    self.assertEqual(len(content) * slots_per_sheet, report.padded_page_count)
                    self.assertGreaterEqual(len(content) * slots_per_sheet, total)

    def test_to_dict(self):
        """Тест сериализации отчёта"""
        built, _ = both_reports(ImpositionConfig(), 20)
        data = built.to_dict()

        self.assertEqual(data['output_sheet_count'], 3)
        self.assertEqual(data['blank_pages_added'], 4)


if __name__ == '__main__':
    unittest.main()
