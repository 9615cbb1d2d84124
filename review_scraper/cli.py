# review_scraper/cli.py
import asyncio
import logging
from typing import Optional

import typer

from review_scraper.aggregate import aggregate
from review_scraper.config import get_settings
from review_scraper.exceptions import ScraperError, SerializationFailure
from review_scraper.models import Category
from review_scraper.output import combine as combine_bundles, serialize, write_bundle, write_csv
from review_scraper.pagination import build_page_urls, offset_of, page_count
from review_scraper.runner import scrape_entities, start_hotel, start_restaurant
from review_scraper.utils import is_tripadvisor_url, load_targets

app = typer.Typer(help="Scrape TripAdvisor hotel and restaurant reviews into CSV.")


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, help="DEBUG | INFO | WARNING")):
    logging.basicConfig(level=(log_level or get_settings().log_level).upper())


def _check_url(url: str, category: Category):
    if not is_tripadvisor_url(url, category):
        typer.echo(f"Not a TripAdvisor {category.value} review url: {url}")
        raise typer.Exit(code=1)


@app.command()
def hotel(
    url: str = typer.Argument(..., help="Hotel review page url"),
    out: Optional[str] = typer.Option(None, help="CSV path (defaults to OUTPUT_FILE)"),
):
    _check_url(url, Category.HOTEL)
    typer.echo(f"Scraping hotel {url} ...")
    try:
        csv_text = asyncio.run(start_hotel(url))
    except ScraperError as e:
        typer.echo(f"Error during scraping: {e}")
        raise typer.Exit(code=2)
    path = write_csv(csv_text, out or get_settings().output_file)
    typer.echo(f"Wrote reviews to {path}")


@app.command()
def restaurant(
    url: str = typer.Argument(..., help="Restaurant review page url"),
    name: str = typer.Option(..., help="Restaurant name"),
    entity_id: str = typer.Option(..., "--id", help="Restaurant id"),
    position: int = typer.Option(0, help="Ordering key in the combined output"),
):
    _check_url(url, Category.RESTAURANT)
    try:
        bundle = asyncio.run(start_restaurant(url, name, entity_id, position))
    except ScraperError as e:
        typer.echo(f"Error during scraping: {e}")
        raise typer.Exit(code=2)
    path = write_bundle(bundle, get_settings().data_dir)
    typer.echo(f"Wrote {bundle.actual_count}/{bundle.declared_count} reviews to {path}")


@app.command()
def batch(
    seeds: str = typer.Argument(..., help="CSV (url,name,id[,position]) or JSON seed list"),
    category: Category = typer.Option(Category.RESTAURANT, help="hotel | restaurant"),
    out: Optional[str] = typer.Option(None, help="CSV path (defaults to OUTPUT_FILE)"),
):
    try:
        targets = load_targets(seeds, category)
    except (OSError, ValueError) as e:
        typer.echo(f"Invalid seed file: {e}")
        raise typer.Exit(code=1)
    for t in targets:
        _check_url(t.url, category)

    typer.echo(f"Scraping {len(targets)} {category.value} page(s) ...")
    report = asyncio.run(scrape_entities(targets))
    for f in report.failures:
        typer.echo(f"FAILED #{f.position} {f.url}: {f.error}")

    try:
        path = write_csv(serialize(aggregate(report.bundles)), out or get_settings().output_file)
    except SerializationFailure as e:
        typer.echo(f"Nothing to write: {e}")
        raise typer.Exit(code=3)
    typer.echo(f"Wrote reviews of {len(report.bundles)} entities to {path}")
    if not report.ok:
        raise typer.Exit(code=2)


@app.command()
def combine(
    data_dir: Optional[str] = typer.Option(None, help="Directory of bundle JSON files"),
    out: Optional[str] = typer.Option(None, help="CSV path (defaults to OUTPUT_FILE)"),
):
    settings = get_settings()
    try:
        path, count = combine_bundles(data_dir or settings.data_dir, out or settings.output_file)
    except SerializationFailure as e:
        typer.echo(f"Nothing to write: {e}")
        raise typer.Exit(code=3)
    except ValueError as e:
        typer.echo(f"Invalid bundle file: {e}")
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {count} reviews to {path}")


@app.command()
def plan(
    url: str = typer.Argument(..., help="First review page url"),
    count: int = typer.Option(..., help="Total review count shown on the page"),
    second_page_url: Optional[str] = typer.Option(None, help="Url of page 2, if the page has a page bar"),
    category: Category = typer.Option(Category.HOTEL, help="hotel | restaurant"),
):
    size = category.page_size
    urls = build_page_urls(url, second_page_url, size, page_count(count, size))
    for u in urls:
        typer.echo(f"{offset_of(u):>6}  {u}")


if __name__ == "__main__":
    app()
