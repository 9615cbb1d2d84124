# review_scraper/aggregate.py
from typing import Iterable, List

from review_scraper.models import EntityBundle, NormalizedReviewRecord, RawReview, RestaurantReview


def normalize(bundle: EntityBundle, review: RawReview) -> NormalizedReviewRecord:
    record = NormalizedReviewRecord(
        entity_name=bundle.entity_name,
        entity_id=bundle.entity_id,
        title=review.title,
        content=review.content,
    )
    if isinstance(review, RestaurantReview):
        record.rating = review.rating
        record.date_of_visit = review.date_of_visit
        record.rating_date = review.rating_date
    return record


def aggregate(bundles: Iterable[EntityBundle]) -> List[NormalizedReviewRecord]:
    '''
    Reviews of all bundles, entities ordered by their position (stable for equal
    positions), each entity's reviews kept in extraction order.
    '''
    records: List[NormalizedReviewRecord] = []
    for bundle in sorted(bundles, key=lambda b: b.position):
        records.extend(normalize(bundle, r) for r in bundle.reviews)
    return records
