"""
Command-line interface for the football news aggregator.

Uses Typer for commands and rich for tables. Supports loading .env files
so settings such as proxies can be configured without exporting them.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .core.sources import sources_for_category
from .core.types import NewsCategory, PublishedArticle
from .logging_utils import setup_logging
from .service import build_service

app = typer.Typer(add_completion=False, help="Aggregate and deduplicate football news feeds.")
console = Console()

CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")


def _load(config: Path | None, log_level: str | None = None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging)
    return cfg


def _parse_category(value: str) -> NewsCategory:
    try:
        return NewsCategory.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _print_articles(articles: list[PublishedArticle], as_json: bool, title: str) -> None:
    if as_json:
        typer.echo(json.dumps([a.to_dict() for a in articles], ensure_ascii=False, indent=2))
        return

    table = Table(title=title)
    table.add_column("Published", no_wrap=True)
    table.add_column("Category")
    table.add_column("Trust", justify="right")
    table.add_column("Title")
    table.add_column("Source")
    table.add_column("Dupes", justify="right")
    for article in articles:
        item = article.article
        table.add_row(
            item.published_at.strftime("%Y-%m-%d %H:%M"),
            item.category.value,
            f"{item.trust_score} ({item.trust_tier.value})",
            item.title,
            item.source,
            str(article.duplicate_count) if article.has_duplicates else "",
        )
    console.print(table)


@app.command()
def fetch(
    category: str = typer.Option("all", "--category", "-k", help="all, general, transfer, injury or match."),
    refresh: bool = typer.Option(False, "--refresh", help="Bypass the cache."),
    config: Path | None = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Fetch, classify and deduplicate news for a category."""
    cat = _parse_category(category)
    cfg = _load(config, log_level)
    service = build_service(cfg)
    articles = asyncio.run(service.fetch_news(cat, force_refresh=refresh))
    _print_articles(articles, as_json, f"{cat.value.title()} news ({service.last_stats.origin})")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in titles, summaries and sources."),
    config: Path | None = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
):
    """Search the latest news across all sources."""
    cfg = _load(config)
    service = build_service(cfg)
    articles = asyncio.run(service.search_news(query))
    _print_articles(articles, as_json, f"Results for {query!r}")


@app.command()
def top(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Maximum number of articles."),
    config: Path | None = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show the most trusted articles across all sources."""
    cfg = _load(config, log_level)
    service = build_service(cfg)
    articles = asyncio.run(service.top_quality_news(limit))
    _print_articles(articles, as_json, "Top quality news")


@app.command("tier-one")
def tier_one(
    config: Path | None = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show transfer news from tier-one and official reporting only."""
    cfg = _load(config, log_level)
    service = build_service(cfg)
    articles = asyncio.run(service.tier_one_transfer_news())
    _print_articles(articles, as_json, "Tier-one transfer news")


@app.command("clear-cache")
def clear_cache(
    category: str | None = typer.Option(None, "--category", "-k", help="Only clear this category."),
    config: Path | None = CONFIG_OPTION,
):
    """Invalidate cached articles."""
    cat = _parse_category(category) if category else None
    cfg = _load(config)
    build_service(cfg).clear_cache(cat)
    console.print(f"Cache cleared: {cat.value if cat else 'all categories'}")


@app.command()
def sources(
    category: str = typer.Option("all", "--category", "-k", help="Show the sources used for a category."),
    config: Path | None = CONFIG_OPTION,
):
    """List the feeds that would be queried for a category."""
    cat = _parse_category(category)
    cfg = _load(config)
    table = Table(title=f"Sources for {cat.value}")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Weight", justify="right")
    table.add_column("Affinity")
    table.add_column("URL")
    for source in sources_for_category(cat, cfg.sources):
        table.add_row(
            source.id,
            source.display_name,
            str(source.trust_weight),
            ", ".join(source.affinity),
            source.url,
        )
    console.print(table)


if __name__ == "__main__":
    app()
