"""sitemap_scout.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitemap_scout.aggregator import ParseReport

#: templates shipped with the package
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: ParseReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from a template and save it.

    Args:
        report: ParseReport of a finished run.
        template_dir: directory holding ``report.html.j2``; *None* uses the
            bundled template.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from sitemap_scout.report.html_report import render_html
    html_path = render_html(report, template_dir=None, output_path='reports/report.html')
    ```
    """
    directory: Optional[Path] = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "base_url": report.base_url,
        "sitemaps": [s.to_dict() for s in report.sitemaps],
        "pages": [p.to_dict() for p in report.extracted_urls],
        "summary": report.summary(),
        "processing_time_ms": report.processing_time_ms,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
