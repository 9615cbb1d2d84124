# review_scraper/scrapers/base_scraper.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from urllib.parse import urljoin
import logging

from playwright.async_api import async_playwright, Page, Error as PlaywrightError

from review_scraper.config import BROWSER_ARGS, Settings, get_settings
from review_scraper.exceptions import MetadataParseFailure, NavigationFailure
from review_scraper.extractors import EXTRACTORS, parse_review_count
from review_scraper.models import Category, EntityBundle, ReviewPageMetadata, ScrapeTarget
from review_scraper.pagination import plan_pages
from review_scraper.utils import iso_now

log = logging.getLogger("scraper")


class BaseReviewScraper:
    '''
    Scrapes every review page of one entity into an EntityBundle.

    Child classes set:
      - category
      - COUNT_SELECTOR: element whose text holds "(<total reviews>)"
    and may override prepare_page(page), which runs after every navigation.
    '''
    category: Category
    COUNT_SELECTOR: str
    PAGE_LINK_SELECTOR = ".pageNum"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.extractor = EXTRACTORS[self.category]

    @property
    def page_size(self) -> int:
        return self.category.page_size

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Page]:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=self.settings.headless, args=BROWSER_ARGS)
            try:
                context = await browser.new_context(
                    viewport={"width": self.settings.viewport_width, "height": self.settings.viewport_height},
                )
                page = await context.new_page()
                page.set_default_timeout(self.settings.navigation_timeout_ms)
                yield page
            finally:
                await browser.close()

    async def prepare_page(self, page: Page) -> None:
        return None

    async def navigate(self, page: Page, url: str) -> None:
        try:
            await page.goto(url, wait_until="networkidle")
            await page.wait_for_selector("body")
            await self.prepare_page(page)
        except PlaywrightError as e:
            raise NavigationFailure(url, f"review page did not load: {e}") from e

    async def read_metadata(self, page: Page, url: str) -> ReviewPageMetadata:
        try:
            label = await page.inner_text(self.COUNT_SELECTOR)
        except PlaywrightError as e:
            raise MetadataParseFailure(url, f"review count {self.COUNT_SELECTOR} not found") from e
        try:
            total = parse_review_count(label)
        except ValueError as e:
            raise MetadataParseFailure(url, str(e)) from e

        # a page number bar only exists when there is more than one page
        try:
            hrefs = await page.eval_on_selector_all(
                self.PAGE_LINK_SELECTOR, "els => els.map(e => e.href || e.getAttribute('href'))"
            )
        except PlaywrightError as e:
            raise NavigationFailure(url, f"could not read page links: {e}") from e
        second = urljoin(page.url, hrefs[1]) if len(hrefs) > 1 and hrefs[1] else None
        return ReviewPageMetadata(total_review_count=total, page_size=self.page_size, second_page_url=second)

    async def extract_reviews_from_page(self, page: Page, url: str) -> List:
        try:
            html = await page.content()
        except PlaywrightError as e:
            raise NavigationFailure(url, f"could not read page content: {e}") from e
        return self.extractor.extract(html)

    async def scrape(self, target: ScrapeTarget) -> EntityBundle:
        async with self.session() as page:
            log.info(f"Gathering info: {target.url}")
            await self.navigate(page, target.url)
            meta = await self.read_metadata(page, target.url)
            plan = plan_pages(target.url, meta.second_page_url, meta.page_size, meta.total_review_count)
            log.info(f"{target.name or target.url}: {meta.total_review_count} reviews over {len(plan)} page(s)")

            reviews = []
            for index, url in enumerate(plan.page_urls):
                # the seed page is already loaded and prepared
                if index > 0:
                    await self.navigate(page, url)
                page_reviews = await self.extract_reviews_from_page(page, url)
                reviews.extend(page_reviews)
                pages_left = len(plan) - 1 - index
                log.info(f"Scraping: {url} | {pages_left} pages left | {round((index + 1) / len(plan) * 100)}%")

        if len(reviews) != meta.total_review_count:
            log.warning(f"{target.url}: declared {meta.total_review_count} reviews, extracted {len(reviews)}")
        return EntityBundle(
            entity_id=target.id,
            entity_name=target.name,
            position=target.position,
            category=self.category,
            seed_url=target.url,
            declared_count=meta.total_review_count,
            actual_count=len(reviews),
            scraped_at=iso_now(),
            reviews=reviews,
        )
