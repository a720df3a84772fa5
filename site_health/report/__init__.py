"""site_health.report: генерация отчётов (JSON и HTML) для CLI и тестов."""

from site_health.report.html_report import render_html
from site_health.report.json_report import render_json

__all__ = ["render_json", "render_html"]
