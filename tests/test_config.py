# tests/test_config.py
import json
import os
import sys
import tempfile
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from imposer.config import ImpositionConfig
from imposer.exceptions import InvalidConfiguration
from imposer.imposition_app import ImpositionApp
from imposer.models import (
    Arrangement, ArrangementKind, BindingType, Flyleaves, MarkKind, Orientation, OutputFormat,
    PaperSpec, PaperType, ScalingMode, SheetMargins, Unit
)


class TestImpositionConfig(unittest.TestCase):

    def test_defaults_are_valid(self):
        """Тест конфигурации по умолчанию"""
        config = ImpositionConfig()
        config.validate()

        self.assertEqual(config.binding_type, BindingType.SIGNATURE)
        self.assertEqual(config.arrangement, Arrangement.quarto())
        self.assertEqual(config.marks, frozenset())

    def test_arrangement_must_be_multiple_of_four(self):
        """Тест размера тетради"""
        for pages in (0, 2, 6, -8):
            with self.subTest(pages=pages):
                config = ImpositionConfig(arrangement=Arrangement.custom(pages))
                with self.assertRaises(InvalidConfiguration):
                    config.validate()
        ImpositionConfig(arrangement=Arrangement.custom(24)).validate()

    def test_standard_arrangement_size_fixed(self):
        """Тест: стандартная схема не допускает другой размер"""
        config = ImpositionConfig(arrangement=Arrangement(ArrangementKind.QUARTO, 12))
        with self.assertRaises(InvalidConfiguration):
            config.validate()

    def test_custom_paper_requires_size(self):
        """Тест произвольного формата бумаги"""
        with self.assertRaises(InvalidConfiguration):
            ImpositionConfig(paper=PaperSpec(PaperType.CUSTOM)).validate()
        with self.assertRaises(InvalidConfiguration):
            ImpositionConfig(paper=PaperSpec(PaperType.CUSTOM, -10, 200)).validate()
        ImpositionConfig(paper=PaperSpec(PaperType.CUSTOM, 300, 400)).validate()

    def test_straight_binding_rejects_two_sided(self):
        """Тест несовместимости переплёта и формата вывода"""
        for binding in (BindingType.PERFECT, BindingType.SIDE_STITCH, BindingType.SPIRAL):
            with self.subTest(binding=binding):
                config = ImpositionConfig(binding_type=binding,
                                          output_format=OutputFormat.TWO_SIDED)
                with self.assertRaises(InvalidConfiguration):
                    config.validate()
        ImpositionConfig(binding_type=BindingType.SIGNATURE,
                         output_format=OutputFormat.TWO_SIDED).validate()

    def test_margins_must_leave_area(self):
        """Тест полей, не оставляющих места на листе"""
        config = ImpositionConfig(sheet_margins=SheetMargins(5, 5, 6, 6, Unit.INCHES))
        with self.assertRaises(InvalidConfiguration):
            config.validate()

    def test_negative_margin_rejected(self):
        """Тест отрицательного поля"""
        with self.assertRaises(InvalidConfiguration):
            ImpositionConfig(sheet_margins=SheetMargins(top=-1)).validate()

    def test_paper_orientation(self):
        """Тест ориентации листа"""
        paper = PaperSpec(PaperType.A4)
        width, height = paper.dimensions_points(Orientation.PORTRAIT)
        self.assertAlmostEqual(width, 595.2756, places=3)
        self.assertAlmostEqual(height, 841.8898, places=3)
        self.assertEqual(paper.dimensions_points(Orientation.LANDSCAPE), (height, width))

    def test_dict_round_trip(self):
        """Тест преобразования в словарь и обратно"""
        config = ImpositionConfig(
            binding_type=BindingType.CASE_BINDING,
            arrangement=Arrangement.custom(20),
            paper=PaperSpec(PaperType.CUSTOM, 320, 450),
            orientation=Orientation.PORTRAIT,
            output_format=OutputFormat.SINGLE_SIDED_SEQUENCE,
            scaling_mode=ScalingMode.STRETCH,
            marks=frozenset({MarkKind.CROP_MARKS, MarkKind.SPINE_MARKS}),
            flyleaves=Flyleaves(1, 2))

        restored = ImpositionConfig.from_dict(json.loads(json.dumps(config.to_dict())))
        self.assertEqual(restored, config)

    def test_from_dict_partial(self):
        """Тест частичного словаря: остальное по умолчанию"""
        config = ImpositionConfig.from_dict({'binding_type': 'spiral', 'arrangement': 'folio'})

        self.assertEqual(config.binding_type, BindingType.SPIRAL)
        self.assertEqual(config.arrangement, Arrangement.folio())
        self.assertEqual(config.scaling_mode, ScalingMode.FIT)

    def test_from_dict_invalid_value(self):
        """Тест недопустимого значения в словаре"""
        with self.assertRaises(InvalidConfiguration):
            ImpositionConfig.from_dict({'binding_type': 'glue'})
        with self.assertRaises(InvalidConfiguration):
            ImpositionConfig.from_dict({'marks': ['glitter']})

    def test_save_and_load_config(self):
        """Тест сохранения и загрузки конфигурации"""
        app = ImpositionApp(ImpositionConfig(arrangement=Arrangement.octavo(),
                                             marks=frozenset({MarkKind.FOLD_LINES})))
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'settings.json')
            app.save_config(path)

            loaded = ImpositionApp()
            loaded.load_config(path)

        self.assertEqual(loaded.config, app.config)


if __name__ == '__main__':
    unittest.main()
