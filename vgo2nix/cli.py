# === FILE: vgo2nix/cli.py ===
#!/usr/bin/env python3
"""
Точка входа vgo2nix: генерация deps.nix из go.mod через командную строку.

Команды:
  generate  Перечислить модули, вычислить sha256 и записать deps.nix
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: vgo2nix.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда generate опции:
  --keep-going        Не прерываться, если ревизию модуля не удалось загрузить
  --dir DIR           Каталог Go-проекта (default: ./)
  --outfile PATH      Выходной deps.nix (относительно каталога проекта)
  --infile PATH       Предыдущий deps.nix (относительно каталога проекта)
  --jobs INT          Число параллельных задач (default: 20)

Дополнительно:
  --version, -v       Показать версию vgo2nix

Пример:
  vgo2nix generate --dir ./myproject --jobs 8 --keep-going
"""
import json
import sys
from pathlib import Path

import click

from vgo2nix import __version__
from vgo2nix.config import apply_overrides, load_config
from vgo2nix.engine import Engine
from vgo2nix.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='vgo2nix, version %(version)s')
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Генерация deps.nix для Go-модулей."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('generate', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--keep-going/--no-keep-going', 'keep_going',
    default=None,
    help='Продолжать, если ревизию модуля не удалось разрешить (default: false)'
)
@click.option(
    '--dir', '-d', 'project_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Каталог Go-проекта (default: ./)'
)
@click.option(
    '--outfile', '-o', 'outfile',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Выходной deps.nix (относительно каталога проекта, default: deps.nix)'
)
@click.option(
    '--infile', '-i', 'infile',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Предыдущий deps.nix (относительно каталога проекта, default: deps.nix)'
)
@click.option(
    '--jobs', '-j', 'jobs',
    type=click.IntRange(min=1),
    default=None,
    help='Число параллельных задач (default: 20)'
)
@click.pass_context
def generate_cmd(ctx, keep_going, project_dir, outfile, infile, jobs):
    """Перечислить модули, вычислить sha256 и записать deps.nix."""
    try:
        cfg = apply_overrides(
            ctx.obj['config'],
            keep_going=keep_going,
            project_dir=project_dir,
            outfile=outfile,
            infile=infile,
            jobs=jobs,
        )
    except Exception as e:
        print_error(f'Ошибка в параметрах: {e}')

    try:
        Engine(cfg).run()
    except OSError as e:
        print_error(f'Ошибка при сохранении {cfg.output_path}: {e}')
    except Exception as e:
        print_error(f'Ошибка при генерации: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(json.dumps(cfg.model_dump(mode='json'), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
