from skinradar.engine.aggregator import aggregate_all, aggregate_category, build_category_result
from skinradar.engine.normalizer import normalize_item

__all__ = [
    "aggregate_all",
    "aggregate_category",
    "build_category_result",
    "normalize_item",
]
