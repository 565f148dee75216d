"""
Командная строка для импозиции PDF
"""
import argparse
import logging
import sys

from imposer.config import ImpositionConfig
from imposer.exceptions import ImpositionError
from imposer.imposition_app import ImpositionApp
from imposer.models import (
    Arrangement, BindingType, Flyleaves, LeafMargins, MarkKind, Orientation, OutputFormat,
    PaperSpec, PaperType, ScalingMode, SheetMargins, Unit
)
from imposer.source_document import open_sources
from utils.helpers import default_output_path
from utils.logger import setup_logging
from config import LOG_FOLDER

logger = logging.getLogger(__name__)

MARK_FLAGS = {
    'fold_lines': MarkKind.FOLD_LINES,
    'cut_lines': MarkKind.CUT_LINES,
    'crop_marks': MarkKind.CROP_MARKS,
    'registration_marks': MarkKind.REGISTRATION_MARKS,
    'sewing_marks': MarkKind.SEWING_MARKS,
    'spine_marks': MarkKind.SPINE_MARKS,
}


def _choices(enum_cls):
    return [item.value for item in enum_cls]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Спуск полос PDF для брошюр и книжных блоков")
    parser.add_argument('inputs', nargs='+', metavar='input',
                        help="Исходные PDF; несколько файлов склеиваются по порядку")
    parser.add_argument('-o', '--output', help="Выходной PDF (по умолчанию <input>_imposed.pdf)")
    parser.add_argument('--config', help="Загрузить настройки из JSON")
    parser.add_argument('--save-config', help="Сохранить итоговые настройки в JSON")

    parser.add_argument('--binding', choices=_choices(BindingType))
    parser.add_argument('--arrangement', choices=['folio', 'quarto', 'octavo', 'custom'])
    parser.add_argument('--pages-per-signature', type=int,
                        help="Страниц в тетради для custom (кратно 4)")
    parser.add_argument('--paper', choices=_choices(PaperType))
    parser.add_argument('--paper-width', type=float, help="Ширина листа custom, мм")
    parser.add_argument('--paper-height', type=float, help="Высота листа custom, мм")
    parser.add_argument('--orientation', choices=_choices(Orientation))
    parser.add_argument('--format', dest='output_format', choices=_choices(OutputFormat))
    parser.add_argument('--scaling', choices=_choices(ScalingMode))
    parser.add_argument('--units', choices=_choices(Unit), default=Unit.MILLIMETERS.value,
                        help="Единицы полей")
    parser.add_argument('--sheet-margin', type=float, help="Поля листа со всех сторон")
    parser.add_argument('--leaf-margins', type=float, nargs=4,
                        metavar=('TOP', 'BOTTOM', 'FORE_EDGE', 'SPINE'),
                        help="Поля полосы")
    parser.add_argument('--front-flyleaves', type=int)
    parser.add_argument('--back-flyleaves', type=int)
    for name in MARK_FLAGS:
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, action='store_true')
    parser.add_argument('--stats-only', action='store_true',
                        help="Только статистика, без создания PDF")
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def config_from_args(args, base: ImpositionConfig) -> ImpositionConfig:
    config = base
    if args.binding:
        config.binding_type = BindingType(args.binding)
    if args.arrangement:
        config.arrangement = Arrangement.from_name(args.arrangement, args.pages_per_signature)
    elif args.pages_per_signature:
        config.arrangement = Arrangement.custom(args.pages_per_signature)
    if args.paper:
        config.paper = PaperSpec(PaperType(args.paper), args.paper_width, args.paper_height)
    if args.orientation:
        config.orientation = Orientation(args.orientation)
    if args.output_format:
        config.output_format = OutputFormat(args.output_format)
    if args.scaling:
        config.scaling_mode = ScalingMode(args.scaling)

    unit = Unit(args.units)
    if args.sheet_margin is not None:
        m = args.sheet_margin
        config.sheet_margins = SheetMargins(m, m, m, m, unit)
    if args.leaf_margins:
        top, bottom, fore_edge, spine = args.leaf_margins
        config.leaf_margins = LeafMargins(top, bottom, fore_edge, spine, unit)
    if args.front_flyleaves is not None or args.back_flyleaves is not None:
        config.flyleaves = Flyleaves(
            args.front_flyleaves if args.front_flyleaves is not None else config.flyleaves.front,
            args.back_flyleaves if args.back_flyleaves is not None else config.flyleaves.back)

    requested = {kind for name, kind in MARK_FLAGS.items() if getattr(args, name)}
    if requested:
        config.marks = frozenset(config.marks | requested)
    return config


def print_statistics(report):
    print(f"Страниц в источнике:   {report.source_page_count}")
    print(f"Тетрадей:              {report.signature_count}")
    print(f"Листов на выходе:      {report.output_sheet_count}")
    print(f"  из них форзацев:     {report.flyleaf_sheet_count}")
    print(f"Добавлено пустых:      {report.blank_pages_added}")
    print(f"Печатных сторон:       {report.output_page_count}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(str(LOG_FOLDER), level=logging.DEBUG if args.verbose else logging.INFO)

    app = ImpositionApp()
    try:
        if args.config:
            app.load_config(args.config)
        app.config = config_from_args(args, app.config)
        app.config.validate()

        if args.save_config:
            app.save_config(args.save_config)

        if args.stats_only:
            page_count = open_sources(args.inputs).page_count()
            print_statistics(app.statistics(page_count))
            return 0

        output = args.output or default_output_path(args.inputs[0])
        written = app.process(args.inputs, str(output))
    except ImpositionError as e:
        logger.error(f"❌ {e}")
        return 1
    except (OSError, RuntimeError) as e:
        logger.error(f"❌ Ошибка ввода-вывода: {e}")
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
