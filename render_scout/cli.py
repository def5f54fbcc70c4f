# === FILE: render_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа RenderScout для ручной проверки через командную строку.

Команды:
  render        Отрендерить страницу и вывести HTML без скриптов
  screenshot    Сохранить скриншот страницы
  availability  Собрать свободные слоты со страницы Calendly
  config        Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  render-scout availability https://calendly.com/acme --month 2024-03 --duration 30 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from render_scout import __version__
from render_scout.config import RendererConfig, load_config
from render_scout.engine import Engine
from render_scout.logger import init_logging
from render_scout.renderer.models import (
    ScreenshotError,
    ScreenshotOptions,
    SerializedResponse,
    ViewportDimensions,
)
from render_scout.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def run_render(cfg: RendererConfig, url: str, is_mobile: bool,
                     timezone_id: Optional[str]) -> SerializedResponse:
    async with Engine(cfg) as engine:
        return await engine.renderer.serialize(url, is_mobile, timezone_id)


async def run_screenshot(cfg: RendererConfig, url: str, is_mobile: bool,
                         dimensions: ViewportDimensions, options: ScreenshotOptions,
                         timezone_id: Optional[str]) -> bytes:
    async with Engine(cfg) as engine:
        return await engine.renderer.screenshot(url, is_mobile, dimensions, options, timezone_id)


async def run_availability(cfg: RendererConfig, url: str, months: Sequence[str],
                           duration: str):
    async with Engine(cfg) as engine:
        return await engine.renderer.scrape_availability(url, months, duration)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='RenderScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Дополнительно писать логи в файл (с ротацией)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд RenderScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('render', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--mobile', is_flag=True, help='Эмулировать мобильное устройство')
@click.option('--timezone', 'timezone_id', default=None, help='Часовой пояс, например Europe/Berlin')
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML в файл'
)
@click.pass_context
def render(ctx, url, mobile, timezone_id, output):
    """Отрендерить страницу и вывести HTML без скриптов."""
    cfg = ctx.obj['config']
    try:
        result = asyncio.run(run_render(cfg, url, mobile, timezone_id))
    except Exception as e:
        print_error(f'Ошибка при рендеринге: {e}')

    click.echo(f'Status: {result.status}', err=True)
    for key, value in result.custom_headers.items():
        click.echo(f'{key}: {value}', err=True)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.content, encoding='utf-8')
        click.echo(f'HTML: {output}', err=True)
    else:
        click.echo(result.content)


@cli.command('screenshot', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--output', '-o', 'output',
    required=True,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Файл для изображения'
)
@click.option('--mobile', is_flag=True, help='Эмулировать мобильное устройство')
@click.option('--width', type=int, default=None, help='Ширина viewport (по умолчанию из конфига)')
@click.option('--height', type=int, default=None, help='Высота viewport (по умолчанию из конфига)')
@click.option(
    '--type', 'image_type',
    default='jpeg', show_default=True,
    type=click.Choice(['jpeg', 'png']),
    help='Формат изображения'
)
@click.option('--full-page', is_flag=True, help='Снимать всю страницу, а не только viewport')
@click.option('--timezone', 'timezone_id', default=None, help='Часовой пояс, например Europe/Berlin')
@click.pass_context
def screenshot(ctx, url, output, mobile, width, height, image_type, full_page, timezone_id):
    """Сохранить скриншот страницы."""
    cfg = ctx.obj['config']
    dimensions = ViewportDimensions(width or cfg.width, height or cfg.height)
    options = ScreenshotOptions(type=image_type, full_page=full_page)
    try:
        image = asyncio.run(run_screenshot(cfg, url, mobile, dimensions, options, timezone_id))
    except ScreenshotError as e:
        print_error(f'Скриншот невозможен: {e.type.value}')
    except Exception as e:
        print_error(f'Ошибка при создании скриншота: {e}')

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image)
    click.echo(f'Screenshot: {output}')


@cli.command('availability', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--month', '-m', 'months',
    multiple=True, required=True,
    help='Месяц в формате YYYY-MM (можно указать несколько раз)'
)
@click.option('--duration', '-d', default='30', show_default=True, help='Длительность слота (минут)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить результат в JSON-файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def availability(ctx, url, months, duration, json_output, pretty):
    """Собрать свободные слоты со страницы Calendly."""
    cfg = ctx.obj['config']
    try:
        result = asyncio.run(run_availability(cfg, url, list(months), duration))
    except Exception as e:
        print_error(f'Ошибка при сборе слотов: {e}')

    if isinstance(result, str):
        print_error(result)

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON: {saved}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    click.echo(json.dumps(result, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
