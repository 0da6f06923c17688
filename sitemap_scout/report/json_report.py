# sitemap_scout/report/json_report.py

"""
JSON report for SitemapScout.

Serializes a ParseReport to a file.
"""
import json
from pathlib import Path

from sitemap_scout.aggregator import ParseReport


def render_json(report: ParseReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: ParseReport of a finished run
    :param output_path: path of the JSON file
    :param pretty: indent with two spaces
    :return: Path of the saved file

    Example:
    ```python
    from sitemap_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
