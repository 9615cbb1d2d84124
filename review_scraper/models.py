# review_scraper/models.py
from enum import Enum
from typing import Optional, List, Dict, Any, Union

from pydantic import BaseModel, Field, ConfigDict, model_validator


class Category(str, Enum):
    HOTEL = "hotel"
    RESTAURANT = "restaurant"

    @property
    def page_size(self) -> int:
        return PAGE_SIZES[self]


# reviews shown per page on each entity type
PAGE_SIZES = {
    Category.HOTEL: 10,
    Category.RESTAURANT: 15,
}


class ReviewPageMetadata(BaseModel):
    total_review_count: int = Field(ge=0)
    page_size: int = Field(gt=0)
    second_page_url: Optional[str] = None


class PaginationPlan(BaseModel):
    page_urls: List[str]

    @property
    def seed_url(self) -> str:
        return self.page_urls[0]

    def __len__(self) -> int:
        return len(self.page_urls)


class HotelReview(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str
    content: str


class RestaurantReview(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str
    content: str
    rating: float = Field(ge=0, le=5)
    date_of_visit: str
    rating_date: str


RawReview = Union[RestaurantReview, HotelReview]


class ScrapeTarget(BaseModel):
    url: str
    name: str = ""
    id: str = ""
    position: int = 0
    category: Category = Category.HOTEL


class EntityBundle(BaseModel):
    model_config = ConfigDict(frozen=True)
    entity_id: str
    entity_name: str
    position: int
    category: Category
    seed_url: str
    declared_count: int
    actual_count: int
    scraped_at: str
    reviews: List[RawReview] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _typed_reviews(cls, data: Any) -> Any:
        # pick the review shape from the category, not by trial and error
        if isinstance(data, dict) and data.get("reviews"):
            model = RestaurantReview if Category(data.get("category")) == Category.RESTAURANT else HotelReview
            data = dict(data)
            data["reviews"] = [r if isinstance(r, BaseModel) else model(**r) for r in data["reviews"]]
        return data

    @model_validator(mode="after")
    def _count_matches(self) -> "EntityBundle":
        if self.actual_count != len(self.reviews):
            raise ValueError(f"actual_count={self.actual_count} but {len(self.reviews)} reviews attached")
        return self


class NormalizedReviewRecord(BaseModel):
    entity_name: str
    entity_id: str
    title: str
    content: str
    rating: Optional[float] = None
    date_of_visit: Optional[str] = None
    rating_date: Optional[str] = None

    def as_row(self) -> Dict[str, Any]:
        '''Column-ordered dict for tabular output; None becomes an empty cell.'''
        return {k: ("" if v is None else v) for k, v in self.model_dump().items()}


class EntityFailure(BaseModel):
    position: int
    url: str
    error: str


class RunReport(BaseModel):
    bundles: List[EntityBundle] = Field(default_factory=list)
    failures: List[EntityFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
