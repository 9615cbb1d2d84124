from review_scraper.aggregate import aggregate
from review_scraper.extractors import extract
from review_scraper.output import serialize
from review_scraper.pagination import build_page_urls, page_count
from review_scraper.runner import scrape_entities, start_hotel, start_restaurant

__all__ = [
    "aggregate",
    "build_page_urls",
    "extract",
    "page_count",
    "scrape_entities",
    "serialize",
    "start_hotel",
    "start_restaurant",
]
