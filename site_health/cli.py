# === FILE: site_health/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteHealth через командную строку.

Команды:
  crawl     Обойти сайт, записать найденные проблемы и посчитать health score
  score     Пересчитать health score по сохранённым нерешённым проблемам
  issues    Показать сохранённые проблемы сайта
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  site-health crawl site-1 example.com --budget 20 --store data/issues.json --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from site_health import __version__
from site_health.aggregator import aggregate_results
from site_health.config import load_config
from site_health.engine import start_crawl
from site_health.logger import DEFAULT_FORMAT, configure
from site_health.report.html_report import render_html
from site_health.report.json_report import render_json
from site_health.scoring import compute_health_score
from site_health.store import InMemoryIssueStore, IssueStore, JsonIssueStore

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _open_store(path: Optional[Path]) -> IssueStore:
    return JsonIssueStore(path) if path is not None else InMemoryIssueStore()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHealth, version %(version)s')
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
    """Группа команд SiteHealth CLI."""
    configure(
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


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('site_id')
@click.argument('domain')
@click.option(
    '--budget', '-b', 'budget',
    type=click.IntRange(min=0),
    default=None,
    help='Макс. число страниц за обход (override max_pages)'
)
@click.option(
    '--store', '-s', 'store_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='JSON-файл хранилища проблем (в памяти, если не указан)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default='templates',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.pass_context
def crawl(ctx, site_id, domain, budget, store_path, json_output, html_output, template_dir, pretty):
    """Обойти сайт DOMAIN и посчитать health score для SITE_ID."""
    cfg = ctx.obj['config']
    store = _open_store(store_path)

    async def _run():
        outcome = await start_crawl(site_id, domain, budget, store=store, config=cfg)
        issues = await store.issues_for(site_id)
        return aggregate_results(outcome, issues)

    try:
        report = asyncio.run(_run())
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
    if json_output:
        try:
            click.echo(f'JSON report: {render_json(report, json_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    if html_output:
        try:
            click.echo(f'HTML report: {render_html(report, template_dir, html_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    if not report.success:
        print_error(f'Обход не завершён: {report.error}')


@cli.command('score', context_settings=CONTEXT_SETTINGS)
@click.argument('site_id')
@click.option(
    '--store', '-s', 'store_path',
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='JSON-файл хранилища проблем'
)
def score(site_id, store_path):
    """Пересчитать health score SITE_ID по нерешённым проблемам."""
    store = JsonIssueStore(store_path)

    async def _run() -> int:
        value = compute_health_score(await store.query_unresolved_severities(site_id))
        await store.update_site(site_id, health_score=value)
        return value

    try:
        click.echo(asyncio.run(_run()))
    except Exception as e:
        print_error(f'Ошибка при расчёте health score: {e}')


@cli.command('issues', context_settings=CONTEXT_SETTINGS)
@click.argument('site_id')
@click.option(
    '--store', '-s', 'store_path',
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='JSON-файл хранилища проблем'
)
@click.option('--all', 'show_all', is_flag=True, help='Включая решённые проблемы')
def list_issues(site_id, store_path, show_all):
    """Показать проблемы SITE_ID в JSON."""
    store = JsonIssueStore(store_path)
    try:
        issues = asyncio.run(store.issues_for(site_id, unresolved_only=not show_all))
    except Exception as e:
        print_error(f'Ошибка чтения хранилища: {e}')
    click.echo(json.dumps([i.to_dict() for i in issues], ensure_ascii=False, indent=2))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
