import logging

import pytest

from review_scraper.aggregate import aggregate
from review_scraper.exceptions import ExtractionFailure, MetadataParseFailure, NavigationFailure
from review_scraper.models import Category, HotelReview, RestaurantReview, ScrapeTarget
from review_scraper.pagination import offset_of, with_offset
from review_scraper.scrapers import HotelScraper, RestaurantScraper

from tests.fakes import (
    HOTEL_PAGE2,
    HOTEL_SEED,
    RESTO_PAGE2,
    RESTO_SEED,
    FakePage,
    fake_scraper,
    hotel_html,
    hotel_reviews,
    hotel_site,
    resto_html,
    resto_review,
)


@pytest.fixture
def hotel_target():
    return ScrapeTarget(url=HOTEL_SEED, name="Beau Rivage Palace", id="231860", position=4, category=Category.HOTEL)


async def test_hotel_end_to_end_three_pages(settings, hotel_target):
    page = FakePage(hotel_site())
    bundle = await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)

    assert [offset_of(u) for u in page.visited] == [0, 10, 20]
    # every page waits for its review-count label
    assert page.waited_for == ["body", HotelScraper.COUNT_SELECTOR] * 3
    assert bundle.declared_count == 23
    assert bundle.actual_count == 23
    assert bundle.position == 4
    assert bundle.category == Category.HOTEL
    assert all(isinstance(r, HotelReview) for r in bundle.reviews)

    records = aggregate([bundle])
    assert len(records) == 23
    assert [r.title for r in records[:2]] == ["title 0.0", "title 0.1"]
    assert records[10].title == "title 1.0"
    assert records[-1].title == "title 2.2"
    assert {r.entity_id for r in records} == {"231860"}
    assert all(r.rating is None for r in records)


async def test_single_page_without_page_bar(settings, hotel_target):
    # declared count says 2 pages but there is no page bar
    page = FakePage({HOTEL_SEED: hotel_html(hotel_reviews(0, 10), total=12)})
    bundle = await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert page.visited == [HOTEL_SEED]
    assert bundle.declared_count == 12
    assert bundle.actual_count == 10


async def test_zero_reviews_is_one_empty_page(settings, hotel_target):
    page = FakePage({HOTEL_SEED: hotel_html([], total=0)})
    bundle = await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert page.visited == [HOTEL_SEED]
    assert bundle.reviews == []
    assert bundle.actual_count == 0


async def test_navigation_failure_aborts_entity_and_closes_session(settings, hotel_target):
    failing = with_offset(HOTEL_PAGE2, 20)
    page = FakePage(hotel_site(), fail_on=[failing])
    with pytest.raises(NavigationFailure) as exc_info:
        await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert exc_info.value.url == failing
    assert page.opened == 1
    assert page.closed == 1


async def test_extraction_failure_propagates(settings, hotel_target):
    site = hotel_site()
    site[HOTEL_PAGE2] = site[HOTEL_PAGE2].replace('<div class="fCitC">', '<div class="x">', 1)
    page = FakePage(site)
    with pytest.raises(ExtractionFailure):
        await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert page.closed == 1


async def test_malformed_count_is_metadata_failure(settings, hotel_target):
    html = hotel_html(hotel_reviews(0, 3), total=3).replace("All languages (3)", "All languages")
    page = FakePage({HOTEL_SEED: html})
    with pytest.raises(MetadataParseFailure):
        await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)


async def test_restaurant_prepares_every_page(settings):
    links = [RESTO_SEED, RESTO_PAGE2]
    site = {
        RESTO_SEED: resto_html([resto_review(title=f"r{i}") for i in range(15)], total=17, page_links=links),
        RESTO_PAGE2: resto_html([resto_review(title="r15"), resto_review(title="r16", bubble=30)], total=17,
                                page_links=links, expandable=False),
    }
    page = FakePage(site)
    target = ScrapeTarget(url=RESTO_SEED, name="Le Cinq", id="1751525", position=0, category=Category.RESTAURANT)
    bundle = await fake_scraper(RestaurantScraper, page, settings).scrape(target)

    assert page.visited == [RESTO_SEED, RESTO_PAGE2]
    assert page.clicks == [
        RestaurantScraper.LANGUAGE_FILTER_SELECTOR,
        RestaurantScraper.EXPAND_SELECTOR,
        RestaurantScraper.LANGUAGE_FILTER_SELECTOR,
    ]
    expanded = f'document.querySelector("body").innerText.includes("{RestaurantScraper.EXPANDED_MARKER}")'
    # only the seed page had truncated reviews to expand
    assert page.waited_for == ["body", "networkidle", expanded, "body", "networkidle"]
    assert bundle.actual_count == 17
    assert all(isinstance(r, RestaurantReview) for r in bundle.reviews)
    assert bundle.reviews[-1].rating == 3.0
    assert [r.title for r in bundle.reviews][-2:] == ["r15", "r16"]


async def test_restaurant_missing_language_filter_is_navigation_failure(settings):
    html = resto_html([resto_review()], total=1).replace('id="filters_detail_language_filterLang_ALL"', "")
    page = FakePage({RESTO_SEED: html})
    target = ScrapeTarget(url=RESTO_SEED, category=Category.RESTAURANT)
    with pytest.raises(NavigationFailure):
        await fake_scraper(RestaurantScraper, page, settings).scrape(target)


async def test_hotel_logs_when_review_section_is_ready(settings, hotel_target, caplog):
    caplog.set_level(logging.DEBUG, logger="hotelscraper")
    page = FakePage({HOTEL_SEED: hotel_html(hotel_reviews(0, 3), total=3)})
    await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert [r.getMessage() for r in caplog.records if r.name == "hotelscraper"] == [
        f"Review section ready on {HOTEL_SEED}",
    ]


async def test_hotel_page_without_count_label_times_out(settings, hotel_target):
    html = hotel_html(hotel_reviews(0, 3), total=3).replace('for="LanguageFilter_1"', "")
    page = FakePage({HOTEL_SEED: html})
    with pytest.raises(NavigationFailure):
        await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    assert HotelScraper.COUNT_SELECTOR not in page.waited_for


async def test_progress_is_logged_per_page(settings, hotel_target, caplog):
    caplog.set_level(logging.INFO, logger="scraper")
    page = FakePage(hotel_site())
    await fake_scraper(HotelScraper, page, settings).scrape(hotel_target)
    progress = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Scraping:")]
    assert progress == [
        f"Scraping: {page.visited[0]} | 2 pages left | 33%",
        f"Scraping: {page.visited[1]} | 1 pages left | 67%",
        f"Scraping: {page.visited[2]} | 0 pages left | 100%",
    ]
