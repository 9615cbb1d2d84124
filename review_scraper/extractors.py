# review_scraper/extractors.py
"""Per-category review extraction from rendered review pages.

Extractors work on the page HTML (``await page.content()``), never on the live
page, so they cannot change page state and can be exercised offline.

NOTE: TripAdvisor class names (``fCitC``, ``partial_entry`` ...) are generated
by the site and change over time. Update the selectors below when extraction
starts failing.
"""
import re
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from review_scraper.exceptions import ExtractionFailure
from review_scraper.models import Category, HotelReview, RestaurantReview

DATE_OF_VISIT_LABEL = "Date of visit:"
_COUNT_IN_PARENS = re.compile(r"\(([0-9][0-9,.\s]*)\)")


def _soup(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "html.parser")


def _text(el: Tag) -> str:
    return el.get_text(" ", strip=True)


def _first_child_text(el: Tag, field: str, index: int) -> str:
    child = el.find(True)
    if child is None:
        raise ExtractionFailure(f"review #{index}: {field} block has no child element", field=field, index=index)
    return _text(child)


def parse_review_count(text: Optional[str]) -> int:
    '''"All languages (1,234)" -> 1234. Raises ValueError when no count is found.'''
    if not text:
        raise ValueError("review count text is empty")
    m = _COUNT_IN_PARENS.search(text)
    if not m:
        raise ValueError(f"no review count in {text!r}")
    return int(re.sub(r"[^0-9]", "", m.group(1)))


def parse_bubble_rating(class_token: str) -> float:
    '''"ui_bubble_rating bubble_45" -> 4.5'''
    digits = re.sub(r"[^0-9]", "", class_token or "")
    if not digits:
        raise ValueError(f"no rating digits in {class_token!r}")
    return int(digits) / 10


class LodgingExtractor:
    category = Category.HOTEL
    TITLE_SELECTOR = ".fCitC"
    CONTENT_SELECTOR = "q"

    def extract(self, html) -> List[HotelReview]:
        soup = _soup(html)
        titles = [_first_child_text(el, "title", i) for i, el in enumerate(soup.select(self.TITLE_SELECTOR))]
        contents = [_first_child_text(el, "content", i) for i, el in enumerate(soup.select(self.CONTENT_SELECTOR))]
        # titles and bodies live in separate blocks; pairing is positional
        if len(titles) != len(contents):
            raise ExtractionFailure(
                f"found {len(titles)} review titles but {len(contents)} review bodies",
                field="title",
            )
        return [HotelReview(title=t, content=c) for t, c in zip(titles, contents)]


class DiningExtractor:
    category = Category.RESTAURANT
    CONTAINER_SELECTOR = ".review-container"
    RATING_SELECTOR = ".ui_bubble_rating"
    VISIT_SELECTOR = ".prw_rup.prw_reviews_stay_date_hsx"
    RATING_DATE_SELECTOR = ".ratingDate"
    TITLE_SELECTOR = ".noQuotes"
    CONTENT_SELECTOR = ".partial_entry"

    def _require(self, item: Tag, selector: str, field: str, index: int) -> Tag:
        el = item.select_one(selector)
        if el is None:
            raise ExtractionFailure(f"review #{index}: missing {field} ({selector})", field=field, index=index)
        return el

    def extract_one(self, item: Tag, index: int = 0) -> RestaurantReview:
        rating_el = self._require(item, self.RATING_SELECTOR, "rating", index)
        try:
            rating = parse_bubble_rating(" ".join(rating_el.get("class", [])))
        except ValueError as e:
            raise ExtractionFailure(f"review #{index}: {e}", field="rating", index=index) from e

        visit = _text(self._require(item, self.VISIT_SELECTOR, "date_of_visit", index))
        rating_date = self._require(item, self.RATING_DATE_SELECTOR, "rating_date", index).get("title")
        if rating_date is None:
            raise ExtractionFailure(f"review #{index}: rating date has no title attribute", field="rating_date", index=index)

        return RestaurantReview(
            rating=rating,
            date_of_visit=visit.replace(DATE_OF_VISIT_LABEL, "").strip(),
            rating_date=rating_date,
            title=_text(self._require(item, self.TITLE_SELECTOR, "title", index)),
            content=_text(self._require(item, self.CONTENT_SELECTOR, "content", index)),
        )

    def extract(self, html) -> List[RestaurantReview]:
        soup = _soup(html)
        return [self.extract_one(item, i) for i, item in enumerate(soup.select(self.CONTAINER_SELECTOR))]


EXTRACTORS = {
    Category.HOTEL: LodgingExtractor(),
    Category.RESTAURANT: DiningExtractor(),
}


def extract(html, category: Category) -> List[Union[HotelReview, RestaurantReview]]:
    return EXTRACTORS[Category(category)].extract(html)
