# === FILE: a11y_page_checker/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска A11y Page Checker через командную строку.

Команды:
  audit     Полный аудит по конфигу: sitemap/обход сайта -> тесты -> отчёты
  url       Аудит одного сайта (обход ссылок) или одного sitemap по URL
  config    Показать итоговую конфигурацию в JSON

Общие опции:
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (кроме stderr)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")
  --version, -V       Показать версию

Пример:
  a11y-page-checker audit --config a11y-config.yml --verbose
  a11y-page-checker url https://example.com/sitemap.xml --sitemap --format json --format html
"""
import sys
from pathlib import Path

import click

from a11y_page_checker import __version__
from a11y_page_checker.config import ReportFormat
from a11y_page_checker.engine import AuditEngine, config_for_url
from a11y_page_checker.logger import DEFAULT_FORMAT, LEVELS, init_logging
from a11y_page_checker.progress import ConsoleProgress

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
FORMAT_CHOICES = [f.value for f in ReportFormat]


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _run(engine: AuditEngine, verbose: bool) -> None:
    try:
        results, reports = engine.start_audit(verbose=verbose)
    except Exception as e:
        print_error(f'Ошибка при аудите: {e}')

    for fmt, output in reports.items():
        if isinstance(output, Path):
            click.echo(f'✅ {fmt.value.upper()} report saved to {output}')

    summary = results.summary
    click.secho(
        f'\n✨ Audit completed: {summary.total_pages} page(s), '
        f'{summary.pages_with_violations} with violations, {summary.total_violations} violation(s).',
        fg='green',
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-V', message='A11y Page Checker, version %(version)s')
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(LEVELS, case_sensitive=False),
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
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, log_level, log_file, log_format):
    """Run accessibility checks on a website or sitemap."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)


@cli.command('audit', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--config', '-c', 'config_path',
    default='a11y-config.yml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--verbose', '-v', is_flag=True, help='Показать подробности по каждому нарушению')
def audit(config_path, verbose):
    """Запустить аудит по конфигу и сгенерировать отчёты."""
    try:
        cfg = AuditEngine.load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo('Starting accessibility audit...')
    _run(AuditEngine(cfg, progress=ConsoleProgress()), verbose)


@cli.command('url', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--sitemap', is_flag=True, help='Считать URL адресом sitemap (иначе сайт обходится по ссылкам)')
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для отчётов'
)
@click.option(
    '--format', '-f', 'formats',
    multiple=True,
    type=click.Choice(FORMAT_CHOICES),
    help='Формат отчёта (можно указать несколько раз, по умолчанию table)'
)
@click.option('--verbose', '-v', is_flag=True, help='Показать подробности по каждому нарушению')
def audit_url(url, sitemap, output_dir, formats, verbose):
    """Аудит сайта или sitemap по URL."""
    try:
        cfg = config_for_url(url, sitemap=sitemap, output_dir=output_dir, formats=formats)
    except Exception as e:
        print_error(f'Некорректные параметры: {e}')

    click.echo(f'Starting accessibility audit of {url}...')
    _run(AuditEngine(cfg, progress=ConsoleProgress()), verbose)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--config', '-c', 'config_path',
    default='a11y-config.yml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
def show_config(config_path):
    """Показать итоговую конфигурацию в JSON."""
    try:
        cfg = AuditEngine.load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2, by_alias=True))


if __name__ == "__main__":
    cli()
