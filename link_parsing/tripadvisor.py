"""
TripAdvisor attraction/restaurant page extraction.

Ratings come either as a plain decimal or encoded in a CSS class
(bubble_45 -> 4.5). No image extraction.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse, unquote

from .fetcher import fetch_webpage
from .html_utils import parse_html, first_present, select_text, select_attr
from .normalizer import build_suggestion, determine_category

PROVIDER = 'tripadvisor'
LOCATION_SENTINEL = 'See TripAdvisor link'
TITLE_FALLBACK = 'TripAdvisor Activity'
DEFAULT_ACTIVITY_TYPE = 'Activity'
MAX_EXCERPT_LENGTH = 200

BUBBLE_RE = re.compile(r'bubble_(\d+)')
DECIMAL_RE = re.compile(r'(\d+(?:\.\d+)?)')

# /Attraction_Review-g60763-d105127-Reviews-Central_Park-New_York_City_New_York.html
REVIEW_PATH_RE = re.compile(r'_Review-.*?-Reviews-([^-./]+)')

TITLE_STRATEGIES = [
    ('h1_main', select_text('h1[data-automation="mainH1"]')),
    ('h1', select_text('h1')),
    ('ui_header', select_text('.ui_header h1')),
    ('heading_title', select_text('.heading_title')),
]

RATING_STRATEGIES = [
    ('overall_rating', select_text('.overallRating')),
    ('automation_rating', select_text('[data-automation="rating"]')),
    ('bubble_class', select_attr('.ui_bubble_rating', 'class')),
    ('bubbles_aria', select_attr('[aria-label*="of 5 bubbles"]', 'aria-label')),
]

ADDRESS_STRATEGIES = [
    ('format_address', select_text('.format_address')),
    ('automation_address', select_text('[data-automation="address"]')),
    ('address_class', select_text('.address')),
]

EXCERPT_STRATEGIES = [
    ('partial_entry', select_text('.partial_entry')),
    ('automation_review_text', select_text('[data-automation="reviewText"]')),
    ('review_text', select_text('.review-text')),
]

ACTIVITY_TYPE_STRATEGIES = [
    ('ui_breadcrumbs', lambda soup: _last_text(soup, '.ui_breadcrumbs a')),
    ('breadcrumbs', lambda soup: _last_text(soup, '.breadcrumbs a')),
]


def _last_text(soup, selector: str) -> Optional[str]:
    elements = soup.select(selector)
    return elements[-1].get_text(' ', strip=True) if elements else None


def parse_tripadvisor_rating(text: Optional[str]) -> float:
    """
    Rating from "4.5", "4.5 of 5 bubbles" or "ui_bubble_rating bubble_45".

    Bubble classes are checked first; their digits are tenths.
    """
    if not text:
        return 0.0

    bubble = BUBBLE_RE.search(text)
    if bubble:
        return min(int(bubble.group(1)) / 10, 5.0)

    match = DECIMAL_RE.search(text)
    if match:
        return min(float(match.group(1)), 5.0)

    return 0.0


def title_from_tripadvisor_url(url: str) -> Optional[str]:
    """Name segment of a *_Review-...-Reviews-<Name>-<City>.html path."""
    match = REVIEW_PATH_RE.search(urlparse(url).path)
    if not match:
        return None
    return ' '.join(unquote(match.group(1)).replace('_', ' ').split()) or None


def scrape_tripadvisor_page(html: str) -> Tuple[dict, dict]:
    soup = parse_html(html)
    fields, sources = {}, {}

    for field, strategies in (
        ('title', TITLE_STRATEGIES),
        ('rating', RATING_STRATEGIES),
        ('address', ADDRESS_STRATEGIES),
        ('description', EXCERPT_STRATEGIES),
        ('activity_type', ACTIVITY_TYPE_STRATEGIES),
    ):
        value, source = first_present(soup, strategies)
        if value:
            fields[field] = value
            sources[field] = source

    if 'rating' in fields:
        fields['rating'] = parse_tripadvisor_rating(fields['rating'])

    if fields.get('description'):
        fields['description'] = fields['description'][:MAX_EXCERPT_LENGTH].strip()

    return fields, sources


def parse_tripadvisor(url: str) -> dict:
    """Parse a TripAdvisor link, degrading to the URL path when the fetch fails."""
    html, fetch_error = fetch_webpage(url)

    fields, sources = {}, {}
    if fetch_error:
        print(f"TripAdvisor scrape failed, using URL extraction only: {fetch_error}")
    else:
        try:
            fields, sources = scrape_tripadvisor_page(html)
        except Exception as e:
            print(f"TripAdvisor parse error, using URL extraction only: {e}")
            fetch_error = f'Parse failed: {str(e)}'

    if not fields.get('title'):
        path_title = title_from_tripadvisor_url(url)
        if path_title:
            fields['title'] = path_title
            sources['title'] = 'url_path'

    title = fields.get('title') or TITLE_FALLBACK
    address = fields.get('address')
    activity_type = fields.get('activity_type') or DEFAULT_ACTIVITY_TYPE
    excerpt = fields.get('description') or ''

    description = excerpt
    if not description:
        description = f"{activity_type} found on TripAdvisor"
        if address:
            description += f" - {address}"

    return build_suggestion(
        url=url,
        title=title,
        location_sentinel=LOCATION_SENTINEL,
        title_fallback=TITLE_FALLBACK,
        description=description,
        category=determine_category(title, f"{activity_type} {excerpt}"),
        location=address,
        rating=fields.get('rating', 0),
        metadata={
            'provider': PROVIDER,
            'fetched': fetch_error is None,
            'fetch_error': fetch_error,
            'rating': fields.get('rating', 0),
            'activity_type': activity_type,
            'sources': sources,
        },
    )
