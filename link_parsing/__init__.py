"""Link parsing utilities for the Activity Planner."""

from .normalizer import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    MAX_TITLE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    determine_category,
    estimate_cost_by_category,
    estimate_duration_by_category,
    adjust_cost_for_price_range,
    rating_to_excitement,
    enhance_google_image_url,
    process_image_url,
    truncate_text,
    is_valid_absolute_url,
)

from .fetcher import (
    FetchError,
    fetch_webpage,
    resolve_redirect,
    is_shortener_url,
)

from .classifier import (
    PROVIDERS,
    classify_provider,
)

from .router import parse_activity_link

__all__ = [
    # Normalization
    'CATEGORIES',
    'DEFAULT_CATEGORY',
    'MAX_TITLE_LENGTH',
    'MAX_DESCRIPTION_LENGTH',
    'determine_category',
    'estimate_cost_by_category',
    'estimate_duration_by_category',
    'adjust_cost_for_price_range',
    'rating_to_excitement',
    'enhance_google_image_url',
    'process_image_url',
    'truncate_text',
    'is_valid_absolute_url',
    # Fetching
    'FetchError',
    'fetch_webpage',
    'resolve_redirect',
    'is_shortener_url',
    # Classification
    'PROVIDERS',
    'classify_provider',
    # Pipeline
    'parse_activity_link',
]
