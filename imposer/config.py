# -*- coding: utf-8 -*-
# imposer/config.py
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet
import logging

from .exceptions import InvalidConfiguration
from .models import (
    Arrangement, ArrangementKind, BindingType, Flyleaves, LeafMargins, MarkKind,
    Orientation, OutputFormat, PaperSpec, PaperType, ScalingMode, SheetMargins, Unit
)

logger = logging.getLogger(__name__)

# Переплёты без фальцованных тетрадей не печатаются раздельными файлами сторон
STRAIGHT_BINDINGS_WITHOUT_TWO_SIDED = frozenset({
    BindingType.PERFECT, BindingType.SIDE_STITCH, BindingType.SPIRAL
})


@dataclass
class ImpositionConfig:
    binding_type: BindingType = BindingType.SIGNATURE
    arrangement: Arrangement = field(default_factory=Arrangement.quarto)
    paper: PaperSpec = field(default_factory=PaperSpec)
    orientation: Orientation = Orientation.LANDSCAPE
    output_format: OutputFormat = OutputFormat.DOUBLE_SIDED
    scaling_mode: ScalingMode = ScalingMode.FIT
    sheet_margins: SheetMargins = field(default_factory=SheetMargins)
    leaf_margins: LeafMargins = field(default_factory=LeafMargins)
    marks: FrozenSet[MarkKind] = frozenset()
    flyleaves: Flyleaves = field(default_factory=Flyleaves)

    def sheet_size(self):
        return self.paper.dimensions_points(self.orientation)

    def validate(self):
        """Проверка структурных инвариантов до планирования"""
        pages = self.arrangement.pages_per_signature
        if pages <= 0 or pages % 4 != 0:
            raise InvalidConfiguration(
                f"Arrangement size must be a positive multiple of 4, got {pages}")
        if self.arrangement.kind is not ArrangementKind.CUSTOM:
            expected = Arrangement.from_name(self.arrangement.kind.value).pages_per_signature
            if pages != expected:
                raise InvalidConfiguration(
                    f"{self.arrangement.kind.value} arrangement holds {expected} pages, got {pages}")

        if self.paper.paper_type is PaperType.CUSTOM:
            if not self.paper.width or not self.paper.height \
                    or self.paper.width <= 0 or self.paper.height <= 0:
                raise InvalidConfiguration(
                    f"Custom paper needs positive width and height, got "
                    f"{self.paper.width}x{self.paper.height}")

        if self.binding_type in STRAIGHT_BINDINGS_WITHOUT_TWO_SIDED \
                and self.output_format is OutputFormat.TWO_SIDED:
            raise InvalidConfiguration(
                f"{self.binding_type.value} binding cannot be combined with two_sided output")

        for name, value in (('top', self.sheet_margins.top), ('bottom', self.sheet_margins.bottom),
                            ('left', self.sheet_margins.left), ('right', self.sheet_margins.right),
                            ('leaf top', self.leaf_margins.top),
                            ('leaf bottom', self.leaf_margins.bottom),
                            ('fore edge', self.leaf_margins.fore_edge),
                            ('spine', self.leaf_margins.spine)):
            if value < 0:
                raise InvalidConfiguration(f"Margin '{name}' must not be negative, got {value}")

        if self.flyleaves.front < 0 or self.flyleaves.back < 0:
            raise InvalidConfiguration("Flyleaf counts must not be negative")

        sheet_width, sheet_height = self.sheet_size()
        unit = self.sheet_margins.unit
        leaf_width = sheet_width - unit.to_points(self.sheet_margins.left + self.sheet_margins.right)
        leaf_height = sheet_height - unit.to_points(self.sheet_margins.top + self.sheet_margins.bottom)
        if leaf_width <= 0 or leaf_height <= 0:
            raise InvalidConfiguration(
                f"Sheet margins leave no printable area on a {sheet_width:.1f}x{sheet_height:.1f}pt sheet")

        logger.debug(f"Configuration valid: {self.binding_type.value}, "
                     f"{self.arrangement.kind.value}({pages}), {self.paper.paper_type.value}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'binding_type': self.binding_type.value,
            'arrangement': {
                'kind': self.arrangement.kind.value,
                'pages_per_signature': self.arrangement.pages_per_signature
            },
            'paper': {
                'type': self.paper.paper_type.value,
                'width': self.paper.width,
                'height': self.paper.height,
                'unit': self.paper.unit.value
            },
            'orientation': self.orientation.value,
            'output_format': self.output_format.value,
            'scaling_mode': self.scaling_mode.value,
            'sheet_margins': {
                'top': self.sheet_margins.top,
                'bottom': self.sheet_margins.bottom,
                'left': self.sheet_margins.left,
                'right': self.sheet_margins.right,
                'unit': self.sheet_margins.unit.value
            },
            'leaf_margins': {
                'top': self.leaf_margins.top,
                'bottom': self.leaf_margins.bottom,
                'fore_edge': self.leaf_margins.fore_edge,
                'spine': self.leaf_margins.spine,
                'unit': self.leaf_margins.unit.value
            },
            'marks': sorted(mark.value for mark in self.marks),
            'flyleaves': {
                'front': self.flyleaves.front,
                'back': self.flyleaves.back
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImpositionConfig':
        """Создание конфигурации из словаря; отсутствующие ключи берут значения по умолчанию"""
        config = cls()
        try:
            if 'binding_type' in data:
                config.binding_type = BindingType(data['binding_type'])
            if 'arrangement' in data:
                arrangement = data['arrangement']
                if isinstance(arrangement, str):
                    config.arrangement = Arrangement.from_name(arrangement)
                else:
                    config.arrangement = Arrangement.from_name(
                        arrangement.get('kind', 'quarto'),
                        arrangement.get('pages_per_signature'))
            if 'paper' in data:
                paper = data['paper']
                config.paper = PaperSpec(
                    PaperType(paper.get('type', 'letter')),
                    _optional_float(paper.get('width')),
                    _optional_float(paper.get('height')),
                    Unit(paper.get('unit', 'millimeters')))
            if 'orientation' in data:
                config.orientation = Orientation(data['orientation'])
            if 'output_format' in data:
                config.output_format = OutputFormat(data['output_format'])
            if 'scaling_mode' in data:
                config.scaling_mode = ScalingMode(data['scaling_mode'])
            if 'sheet_margins' in data:
                margins = data['sheet_margins']
                config.sheet_margins = SheetMargins(
                    float(margins.get('top', 5)), float(margins.get('bottom', 5)),
                    float(margins.get('left', 5)), float(margins.get('right', 5)),
                    Unit(margins.get('unit', 'millimeters')))
            if 'leaf_margins' in data:
                margins = data['leaf_margins']
                config.leaf_margins = LeafMargins(
                    float(margins.get('top', 0)), float(margins.get('bottom', 0)),
                    float(margins.get('fore_edge', 0)), float(margins.get('spine', 0)),
                    Unit(margins.get('unit', 'millimeters')))
            if 'marks' in data:
                config.marks = frozenset(MarkKind(mark) for mark in data['marks'])
            if 'flyleaves' in data:
                flyleaves = data['flyleaves']
                config.flyleaves = Flyleaves(int(flyleaves.get('front', 0)),
                                             int(flyleaves.get('back', 0)))
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidConfiguration(f"Invalid configuration value: {e}") from e
        return config


def _optional_float(value):
    if value is None or value == '':
        return None
    return float(value)
