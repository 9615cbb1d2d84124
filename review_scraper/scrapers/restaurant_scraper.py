# review_scraper/scrapers/restaurant_scraper.py
"""Restaurant review pages.

Restaurant pages only list reviews in the visitor's language until the
"all languages" filter is selected, and truncate long reviews behind a
"More" link. Both have to be dealt with on every page before the review
count or the review texts are read.
"""
import logging

from playwright.async_api import Page

from review_scraper.models import Category
from review_scraper.scrapers.base_scraper import BaseReviewScraper

log = logging.getLogger("restoscraper")


class RestaurantScraper(BaseReviewScraper):
    category = Category.RESTAURANT
    COUNT_SELECTOR = ".reviews_header_count"
    LANGUAGE_FILTER_SELECTOR = "[id=filters_detail_language_filterLang_ALL]"
    EXPAND_SELECTOR = ".taLnk.ulBlueLinks"
    EXPANDED_MARKER = "Show less"

    async def prepare_page(self, page: Page) -> None:
        await page.click(self.LANGUAGE_FILTER_SELECTOR)
        await page.wait_for_load_state("networkidle")

        more = await page.query_selector(self.EXPAND_SELECTOR)
        if more is None:
            log.debug(f"No truncated reviews on {page.url}")
            return
        await more.click()
        await page.wait_for_function(
            f'document.querySelector("body").innerText.includes("{self.EXPANDED_MARKER}")'
        )
