# review_scraper/scrapers/hotel_scraper.py
import logging

from playwright.async_api import Page

from review_scraper.models import Category
from review_scraper.scrapers.base_scraper import BaseReviewScraper

log = logging.getLogger("hotelscraper")


class HotelScraper(BaseReviewScraper):
    category = Category.HOTEL
    # "All languages (1,234)" radio label of the language filter
    COUNT_SELECTOR = "[for=LanguageFilter_1]"

    async def prepare_page(self, page: Page) -> None:
        # the review section is rendered client side; its language filter is the last thing to appear
        await page.wait_for_selector(self.COUNT_SELECTOR)
        log.debug(f"Review section ready on {page.url}")
