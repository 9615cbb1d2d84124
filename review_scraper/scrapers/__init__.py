from review_scraper.models import Category
from review_scraper.scrapers.base_scraper import BaseReviewScraper
from review_scraper.scrapers.hotel_scraper import HotelScraper
from review_scraper.scrapers.restaurant_scraper import RestaurantScraper

SCRAPER_MAP = {
    Category.HOTEL: HotelScraper,
    Category.RESTAURANT: RestaurantScraper,
}

__all__ = ["BaseReviewScraper", "HotelScraper", "RestaurantScraper", "SCRAPER_MAP"]
