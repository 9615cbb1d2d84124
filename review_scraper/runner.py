# review_scraper/runner.py
import asyncio
import logging
from typing import Callable, Iterable, Optional

from review_scraper.aggregate import aggregate
from review_scraper.config import Settings, get_settings
from review_scraper.models import Category, EntityBundle, EntityFailure, NormalizedReviewRecord, RunReport, ScrapeTarget
from review_scraper.output import serialize, write_bundle
from review_scraper.scrapers import SCRAPER_MAP, BaseReviewScraper
from review_scraper.utils import entity_id_from_url, entity_slug

log = logging.getLogger("runner")

ScraperFactory = Callable[[Category, Settings], BaseReviewScraper]


def default_factory(category: Category, settings: Settings) -> BaseReviewScraper:
    return SCRAPER_MAP[Category(category)](settings=settings)


async def start_hotel(seed_url: str, settings: Optional[Settings] = None,
                      factory: ScraperFactory = default_factory) -> str:
    '''Scrape one hotel end to end and return its reviews as CSV text.'''
    settings = settings or get_settings()
    target = ScrapeTarget(
        url=seed_url,
        name=entity_slug(seed_url),
        id=entity_id_from_url(seed_url) or "",
        category=Category.HOTEL,
    )
    bundle = await factory(Category.HOTEL, settings).scrape(target)
    # zero reviews gives a header-only table
    return serialize(aggregate([bundle]), columns=list(NormalizedReviewRecord.model_fields))


async def start_restaurant(seed_url: str, name: str, entity_id: str, position: int,
                           settings: Optional[Settings] = None,
                           factory: ScraperFactory = default_factory) -> EntityBundle:
    settings = settings or get_settings()
    target = ScrapeTarget(url=seed_url, name=name, id=entity_id, position=position, category=Category.RESTAURANT)
    return await factory(Category.RESTAURANT, settings).scrape(target)


async def scrape_entities(targets: Iterable[ScrapeTarget], settings: Optional[Settings] = None,
                          persist: bool = True, factory: ScraperFactory = default_factory) -> RunReport:
    '''
    Scrape many entities with at most settings.concurrency browsers open at a
    time. A failing entity is reported in the RunReport and does not stop the
    others; bundles come back in position order.
    '''
    settings = settings or get_settings()
    targets = list(targets)
    semaphore = asyncio.Semaphore(max(1, settings.concurrency))

    async def run_one(target: ScrapeTarget):
        async with semaphore:
            try:
                bundle = await factory(target.category, settings).scrape(target)
                if persist:
                    path = await asyncio.to_thread(write_bundle, bundle, settings.data_dir)
                    log.info(f"Wrote {bundle.actual_count} reviews of {bundle.entity_name or bundle.seed_url} to {path}")
            except Exception as e:
                log.exception(f"Entity #{target.position} failed: {target.url}")
                return EntityFailure(position=target.position, url=target.url, error=f"{type(e).__name__}: {e}")
            return bundle

    results = await asyncio.gather(*(run_one(t) for t in targets))

    report = RunReport()
    for r in results:
        if isinstance(r, EntityFailure):
            report.failures.append(r)
        else:
            report.bundles.append(r)
    report.bundles.sort(key=lambda b: b.position)
    log.info(f"Scraped {len(report.bundles)}/{len(targets)} entities, {len(report.failures)} failed")
    return report
