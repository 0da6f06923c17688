# File: tests/test_cli.py
"""CLI tests (`sitemap_scout.cli`) with click.testing.CliRunner.

The parsing run is replaced with a fake so no network is touched; these
cover `parse`, `config`, `--version` and error reporting.
"""
import asyncio
import importlib
import json

import pytest
from click.testing import CliRunner

from sitemap_scout.aggregator import ParseReport
from sitemap_scout.cli import cli
from sitemap_scout.crawler.models import ParsedPageData, SitemapInfo, Status
from sitemap_scout.errors import InvalidInputError, NoSitemapFoundError

# sitemap_scout/__init__ re-exports the `cli` Group, which shadows the submodule attribute
cli_module = importlib.import_module("sitemap_scout.cli")


def make_report(base_url="https://example.com"):
    sitemap = SitemapInfo(url=f"{base_url}/sitemap.xml")
    sitemap.succeed(1)
    page = ParsedPageData(url=f"{base_url}/about", keyword="about", status=Status.SUCCESS, title="About")
    return ParseReport(base_url=base_url, sitemaps=[sitemap], extracted_urls=[page], processing_time_ms=12)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command outside the repo so configs/default.yaml is not picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def calls(monkeypatch):
    """Replace the parsing run with a fake that records its arguments."""
    seen = []

    async def fake_parse(base_url, settings=None, config=None):
        seen.append({"base_url": base_url, "settings": settings, "config": config})
        return make_report(base_url.rstrip("/"))

    monkeypatch.setattr(cli_module, "parse_website_sitemaps", fake_parse)
    return seen


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SitemapScout" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "custom.yaml"
    cfg_file.write_text("timeout: 3\nuser_agent: Agent/1.0\nsettings:\n  countWords: true\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["timeout"] == 3.0
    assert data["user_agent"] == "Agent/1.0"
    assert data["settings"]["count_words"] is True


def test_invalid_config_file(tmp_path):
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("retry_times: 0\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_parse_stdout(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com/"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["baseUrl"] == "https://example.com"
    assert data["extractedUrls"][0]["title"] == "About"
    assert data["summary"] == {"totalUrlsExtracted": 1, "successfulSitemaps": 1, "failedSitemaps": 0}
    assert calls[0]["base_url"] == "https://example.com/"


def test_parse_pretty_stdout(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--pretty"])
    assert result.exit_code == 0
    assert result.stdout.startswith("{\n  ")


def test_flags_turn_settings_on(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--title-h1", "--links"])
    assert result.exit_code == 0
    settings = calls[0]["settings"]
    assert settings.extract_title_h1 is True
    assert settings.count_internal_and_external_links is True
    assert settings.count_words is False
    assert settings.parse_multimedia_sitemaps is False


def test_all_flag(calls):
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--all"])
    assert result.exit_code == 0
    assert all(calls[0]["settings"].model_dump().values())


def test_flags_extend_configured_settings(tmp_path, calls):
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"settings": {"checkCanonical": True}}), encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "parse", "https://example.com", "--words"])
    assert result.exit_code == 0
    settings = calls[0]["settings"]
    assert settings.check_canonical is True
    assert settings.count_words is True
    assert calls[0]["config"].settings.count_words is False


def test_parse_json_file(tmp_path, calls):
    out = tmp_path / "reports" / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--json", str(out)])
    assert result.exit_code == 0
    assert f"JSON report: {out}" in result.stdout
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["sitemaps"][0] == {
        "url": "https://example.com/sitemap.xml",
        "type": "xml",
        "status": "success",
        "urlCount": 1,
    }


def test_parse_html_file(tmp_path, calls):
    out = tmp_path / "report.html"
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--html", str(out)])
    assert result.exit_code == 0
    html = out.read_text(encoding="utf-8")
    assert "https://example.com/about" in html
    assert "About" in html


def test_parse_html_custom_template(tmp_path, calls):
    templates = tmp_path / "tpl"
    templates.mkdir()
    (templates / "report.html.j2").write_text(
        "{{ base_url }}|{{ summary.totalUrlsExtracted }}|{{ pages[0].keyword }}", encoding="utf-8"
    )
    out = tmp_path / "custom.html"

    runner = CliRunner()
    result = runner.invoke(
        cli, ["parse", "https://example.com", "--html", str(out), "--template", str(templates)]
    )
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "https://example.com|1|about"


def test_parse_timeout(monkeypatch):
    async def slow(base_url, settings=None, config=None):
        await asyncio.sleep(2)
        return make_report()

    monkeypatch.setattr(cli_module, "parse_website_sitemaps", slow)

    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "https://example.com", "--scan-timeout", "0.1"])
    assert result.exit_code == 1
    assert "did not finish within 0.1 seconds" in result.output


@pytest.mark.parametrize(
    "exc,message",
    [
        (InvalidInputError("Invalid or malformed base URL provided."), "Invalid or malformed base URL"),
        (NoSitemapFoundError("Could not find any valid sitemap"), "Could not find any valid sitemap"),
        (RuntimeError("boom"), "Parsing failed: boom"),
    ],
)
def test_parse_errors(monkeypatch, exc, message):
    async def failing(base_url, settings=None, config=None):
        raise exc

    monkeypatch.setattr(cli_module, "parse_website_sitemaps", failing)

    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "not-a-url"])
    assert result.exit_code == 1
    assert message in result.output
    assert result.stdout == ""
