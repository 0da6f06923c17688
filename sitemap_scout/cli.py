# === FILE: sitemap_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of SitemapScout.

Commands:
  parse URL   Discover and parse the sitemaps of URL, print/save the report
  config      Show the effective configuration

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format string

parse options:
  --title-h1 / --canonical / --words / --links / --competition / --multimedia
                      Enable one enrichment each; --all enables every one
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Directory with Jinja2 templates (bundled one by default)
  --pretty            Indent JSON printed to stdout
  --scan-timeout SEC  Timeout of the whole run (seconds)

Also:
  --version, -v       Show the SitemapScout version

Example:
  sitemap-scout parse https://example.com --title-h1 --canonical --json report.json
"""
import asyncio
import sys
from pathlib import Path

import click

from sitemap_scout import __version__
from sitemap_scout.config import ExtractionSettings, load_config
from sitemap_scout.engine import parse_website_sitemaps
from sitemap_scout.errors import InvalidInputError, NoSitemapFoundError
from sitemap_scout.logger import init_logging
from sitemap_scout.report.html_report import render_html
from sitemap_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

# CLI flag -> ExtractionSettings field
_FLAG_FIELDS = {
    "title_h1": "extract_title_h1",
    "canonical": "check_canonical",
    "words": "count_words",
    "links": "count_internal_and_external_links",
    "competition": "estimate_competition",
    "multimedia": "parse_multimedia_sitemaps",
}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_settings(base: ExtractionSettings, enable_all: bool, **flags: bool) -> ExtractionSettings:
    """Turn on every setting whose flag was given; flags never turn a setting off."""
    if enable_all:
        return ExtractionSettings.all_enabled()
    update = {_FLAG_FIELDS[name]: True for name, value in flags.items() if value}
    return base.model_copy(update=update) if update else base


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SitemapScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('parse', context_settings=CONTEXT_SETTINGS)
@click.argument('base_url')
@click.option('--title-h1', 'title_h1', is_flag=True, help='Extract <title> and first <h1>')
@click.option('--canonical', is_flag=True, help='Check <link rel="canonical">')
@click.option('--words', is_flag=True, help='Count words of the page body')
@click.option('--links', is_flag=True, help='Count internal and external links')
@click.option('--competition', is_flag=True, help='Estimate the competition score')
@click.option('--multimedia', is_flag=True, help='Accept image/video sitemaps')
@click.option('--all', 'enable_all', is_flag=True, help='Enable every enrichment')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with Jinja2 templates'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON printed to stdout (2 spaces)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout of the whole run (seconds)'
)
@click.pass_context
def parse(ctx, base_url, title_h1, canonical, words, links, competition, multimedia,
          enable_all, json_output, html_output, template_dir, pretty, scan_timeout):
    """Discover and parse the sitemaps of BASE_URL."""
    cfg = ctx.obj['config']
    settings = build_settings(
        cfg.settings,
        enable_all,
        title_h1=title_h1,
        canonical=canonical,
        words=words,
        links=links,
        competition=competition,
        multimedia=multimedia,
    )
    click.echo(f'Parsing sitemaps of {base_url}', err=True)
    try:
        coro = parse_website_sitemaps(base_url, settings, cfg)
        if scan_timeout:
            report = asyncio.run(asyncio.wait_for(coro, timeout=scan_timeout))
        else:
            report = asyncio.run(coro)
    except asyncio.TimeoutError:
        print_error(f'Parsing did not finish within {scan_timeout} seconds')
    except (InvalidInputError, NoSitemapFoundError) as e:
        print_error(str(e))
    except Exception as e:
        print_error(f'Parsing failed: {e}')

    # Nothing to save: print to stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
