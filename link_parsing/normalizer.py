"""
Normalization utilities for the Activity Link Parser.

Maps raw extracted fields into the canonical ActivitySuggestion schema:
- Category inference from keyword groups (ordered, first match wins)
- Cost and duration estimates per category
- Star rating (0-5) to excitement (0-10) conversion
- Google image URL upgrades
- Title/description truncation

All tables here are read-only module data.
"""

import re
from types import MappingProxyType
from typing import Optional, Tuple
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

# Closed set of categories, in inference order
CATEGORIES = (
    'Food & Dining',
    'Entertainment',
    'Outdoor',
    'Relaxation',
    'Adventure',
    'Travel',
    'Date Night',
    'Cultural',
    'Shopping',
)

DEFAULT_CATEGORY = 'Entertainment'
DEFAULT_COST = 25
DEFAULT_DURATION = 120

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 300

# Keyword groups tested in order - a text matching both "food" and "movie"
# resolves to Food & Dining
CATEGORY_KEYWORDS = (
    ('Food & Dining', (
        'restaurant', 'food', 'dining', 'cafe', 'bar', 'pizza', 'cuisine', 'menu',
        'coffee', 'bakery', 'deli', 'bistro', 'sweet', 'dessert', 'indian',
        'chinese', 'thai', 'italian', 'mexican', 'grill', 'kitchen',
    )),
    ('Entertainment', (
        'movie', 'theater', 'cinema', 'show', 'concert', 'music',
        'entertainment', 'club', 'venue',
    )),
    ('Outdoor', (
        'hike', 'trail', 'park', 'outdoor', 'nature', 'beach', 'mountain',
        'camping', 'garden', 'zoo', 'aquarium',
    )),
    ('Relaxation', (
        'spa', 'massage', 'relax', 'wellness', 'meditation', 'salon',
    )),
    ('Adventure', (
        'adventure', 'extreme', 'sport', 'climb', 'jump', 'race', 'gym', 'fitness',
    )),
    ('Travel', (
        'travel', 'hotel', 'flight', 'vacation', 'trip', 'resort',
    )),
    ('Date Night', (
        'romantic', 'date', 'couple', 'intimate', 'wine', 'lounge',
    )),
    ('Cultural', (
        'museum', 'gallery', 'art', 'history', 'cultural', 'exhibit',
    )),
    ('Shopping', (
        'shop', 'store', 'mall', 'market', 'boutique', 'retail',
    )),
)

CATEGORY_COSTS = MappingProxyType({
    'Food & Dining': 50,
    'Entertainment': 25,
    'Outdoor': 10,
    'Relaxation': 80,
    'Adventure': 60,
    'Travel': 200,
    'Date Night': 75,
    'Cultural': 20,
    'Shopping': 100,
})

# Minutes
CATEGORY_DURATIONS = MappingProxyType({
    'Food & Dining': 90,
    'Entertainment': 150,
    'Outdoor': 180,
    'Relaxation': 120,
    'Adventure': 240,
    'Travel': 480,
    'Date Night': 180,
    'Cultural': 120,
    'Shopping': 150,
})

# Yelp price-range symbols: (symbol, bound, is_floor)
PRICE_RANGE_BOUNDS = (
    ('$$$$', 100, True),
    ('$$$', 60, True),
    ('$$', 30, True),
    ('$', 25, False),
)

# Canonical target sizes for Google-hosted images
PLACE_IMAGE_SIZE = 1200
GENERAL_IMAGE_SIZE = 800


def determine_category(title: str, content: str = '') -> str:
    """
    Infer an activity category from free text.

    Lower-cases and concatenates both inputs, then returns the first
    keyword group with any substring match.

    Examples:
        >>> determine_category("Joe's Pizza", "")
        'Food & Dining'

        >>> determine_category("Something", "nothing relevant")
        'Entertainment'
    """
    text = f"{title or ''} {content or ''}".lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category

    return DEFAULT_CATEGORY


def estimate_cost_by_category(category: str) -> int:
    """Default cost for a category, 25 for anything unknown."""
    return CATEGORY_COSTS.get(category, DEFAULT_COST)


def estimate_duration_by_category(category: str) -> int:
    """Default duration in minutes for a category, 120 for anything unknown."""
    return CATEGORY_DURATIONS.get(category, DEFAULT_DURATION)


def adjust_cost_for_price_range(cost: float, price_range: Optional[str]) -> float:
    """
    Clamp a category cost estimate against a Yelp price range.

    "$$$$", "$$$" and "$$" raise the estimate to a floor; a single "$"
    caps it at a ceiling. Anything else leaves the cost untouched.
    """
    if not price_range:
        return cost

    match = re.search(r'\${1,4}', price_range)
    if not match:
        return cost

    symbols = match.group()
    for symbol, bound, is_floor in PRICE_RANGE_BOUNDS:
        if symbols == symbol:
            return max(cost, bound) if is_floor else min(cost, bound)

    return cost


def rating_to_excitement(rating) -> int:
    """
    Convert a 0-5 star rating to the 0-10 excitement scale.

    Rounds half up, so 4.5 -> 9 and 2.25 -> 5. Missing, invalid or
    non-positive ratings mean "no signal" and return 0.
    """
    try:
        rating = float(rating or 0)
    except (TypeError, ValueError):
        return 0

    if rating <= 0:
        return 0

    rating = min(rating, 5.0)
    return max(0, min(10, int(rating * 2 + 0.5)))


def enhance_google_image_url(url: Optional[str], size: int = PLACE_IMAGE_SIZE) -> Optional[str]:
    """Request a larger variant of a googleusercontent image (Maps place photos)."""
    if not url or 'googleusercontent.com' not in url:
        return url

    height = round(size * 630 / 1200)
    url = re.sub(r'=w\d+-h\d+(?:-[a-z]+)*', f'=w{size}-h{height}-p-k-no', url)
    url = re.sub(r'=s\d+(?=[-&]|$)', f'=s{size}', url)
    return url


def process_image_url(url: Optional[str]) -> Optional[str]:
    """
    General image URL cleanup.

    - Protocol-relative URLs get https
    - googleusercontent size segments are upgraded to 800 wide
    - Static map URLs get a size and zoom when they lack one
    """
    if not url:
        return None

    url = url.strip()
    if url.startswith('//'):
        url = 'https:' + url

    if 'googleusercontent.com' in url:
        url = re.sub(r'=w\d+-h\d+(?:-[a-z]+)*', f'=w{GENERAL_IMAGE_SIZE}-h600', url)
        url = re.sub(r'=s\d+(?=[-&]|$)', f'=s{GENERAL_IMAGE_SIZE}', url)

    elif 'maps.googleapis.com' in url and 'staticmap' in url:
        parsed = urlparse(url)
        params = parse_qsl(parsed.query, keep_blank_values=True)
        keys = {key for key, _ in params}
        if 'size' not in keys:
            params.append(('size', f'{GENERAL_IMAGE_SIZE}x600'))
        if 'zoom' not in keys:
            params.append(('zoom', '15'))
        url = urlunparse(parsed._replace(query=urlencode(params, safe=',:|')))

    return url


def truncate_text(text: Optional[str], max_length: int) -> Tuple[str, bool]:
    """
    Truncate text at a word boundary, appending an ellipsis.

    The result is never longer than max_length.

    Returns:
        Tuple of (truncated_text, was_truncated)

    Examples:
        >>> truncate_text("Hello World", 100)
        ('Hello World', False)

        >>> truncate_text("This is a very long title that exceeds the limit", 20)
        ('This is a very...', True)
    """
    if not text:
        return ('', False)

    # Clean whitespace
    text = ' '.join(text.split())

    if len(text) <= max_length:
        return (text, False)

    limit = max_length - 3
    truncated = text[:limit]
    last_space = truncated.rfind(' ')

    # Single long word, cut at the limit
    if last_space <= 0:
        return (truncated + '...', True)

    return (truncated[:last_space].rstrip(' ,;:-') + '...', True)


def is_valid_absolute_url(url) -> bool:
    """True for http(s) URLs with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def build_suggestion(
    url: str,
    title: Optional[str],
    location_sentinel: str,
    title_fallback: str,
    description: Optional[str] = None,
    category: Optional[str] = None,
    category_content: str = '',
    location: Optional[str] = None,
    image_url: Optional[str] = None,
    rating=0,
    price_range: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> dict:
    """
    Assemble a schema-valid ActivitySuggestion from raw fields.

    Every field may be missing; defaults fill each gap so the result
    always satisfies the schema invariants.
    """
    title = (title or '').strip() or title_fallback

    if category not in CATEGORIES:
        category = determine_category(title, category_content)

    estimated_cost = adjust_cost_for_price_range(estimate_cost_by_category(category), price_range)

    suggestion = {
        'title': title,
        'description': (description or '').strip(),
        'category': category,
        'location': (location or '').strip() or location_sentinel,
        'url': url,
        'image_url': image_url or None,
        'estimated_cost': max(0, estimated_cost),
        'excitement': rating_to_excitement(rating),
        'duration': estimate_duration_by_category(category),
    }

    if metadata is not None:
        suggestion['_metadata'] = metadata

    return suggestion


def build_manual_input_suggestion(
    url: str,
    title: str,
    description: str,
    location: str,
    source: str,
    metadata: Optional[dict] = None,
) -> dict:
    """
    Assemble a mostly-empty suggestion that asks the caller to collect the
    details from the user.
    """
    suggestion = {
        'title': title,
        'description': description,
        'category': DEFAULT_CATEGORY,
        'location': location,
        'url': url,
        'image_url': None,
        'estimated_cost': 0,
        'excitement': 0,
        'duration': 0,
        'source': source,
        'manual_input_required': True,
    }

    if metadata is not None:
        suggestion['_metadata'] = metadata

    return suggestion
