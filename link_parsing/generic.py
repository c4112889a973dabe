"""
Generic webpage extraction, the fallback for every unrecognized link.

Unlike the provider extractors there is no URL-only fallback here: a
failed fetch raises FetchError and the request fails.
"""

from typing import Tuple
from urllib.parse import urljoin

from .fetcher import FetchError, fetch_webpage
from .html_utils import parse_html, first_present, select_text, select_attr, meta_strategy
from .normalizer import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    build_suggestion,
    determine_category,
    process_image_url,
    truncate_text,
)

PROVIDER = 'generic'
LOCATION_SENTINEL = 'See link for details'
TITLE_FALLBACK = 'Web Activity'
DESCRIPTION_FALLBACK = 'Activity found on the web'
MAX_PARAGRAPH_LENGTH = 200

TITLE_STRATEGIES = [
    ('og:title', meta_strategy('og:title')),
    ('twitter:title', meta_strategy('twitter:title')),
    ('meta_title', meta_strategy('title')),
    ('title_tag', select_text('title')),
    ('h1', select_text('h1')),
]

DESCRIPTION_STRATEGIES = [
    ('og:description', meta_strategy('og:description')),
    ('meta_description', meta_strategy('description')),
    ('twitter:description', meta_strategy('twitter:description')),
    ('first_paragraph', lambda soup: (select_text('p')(soup) or '')[:MAX_PARAGRAPH_LENGTH]),
]

IMAGE_STRATEGIES = [
    ('og:image', meta_strategy('og:image')),
    ('twitter:image', meta_strategy('twitter:image')),
    ('first_img', select_attr('img[src]', 'src')),
]

ADDRESS_STRATEGIES = [
    ('itemprop_address', select_text('[itemprop="address"]')),
    ('address_tag', select_text('address')),
    ('address_class', select_text('.address')),
    ('location_class', select_text('.location')),
    ('address_class_fragment', select_text('[class*="address"]')),
]


def extract_generic_fields(html: str, url: str) -> Tuple[dict, dict]:
    """Returns (fields, sources) for title, description, image_url and address."""
    soup = parse_html(html)
    fields, sources = {}, {}

    for field, strategies in (
        ('title', TITLE_STRATEGIES),
        ('description', DESCRIPTION_STRATEGIES),
        ('image_url', IMAGE_STRATEGIES),
        ('address', ADDRESS_STRATEGIES),
    ):
        value, source = first_present(soup, strategies)
        if value:
            fields[field] = value
            sources[field] = source

    if fields.get('image_url'):
        fields['image_url'] = process_image_url(urljoin(url, fields['image_url']))

    return fields, sources


def parse_generic(url: str) -> dict:
    """Parse an arbitrary webpage. Raises FetchError if it can't be fetched."""
    html, fetch_error = fetch_webpage(url)
    if fetch_error:
        raise FetchError(fetch_error)

    fields, sources = extract_generic_fields(html, url)

    title, title_truncated = truncate_text(fields.get('title') or TITLE_FALLBACK, MAX_TITLE_LENGTH)
    description, _ = truncate_text(fields.get('description') or DESCRIPTION_FALLBACK, MAX_DESCRIPTION_LENGTH)
    address = fields.get('address')

    return build_suggestion(
        url=url,
        title=title,
        location_sentinel=LOCATION_SENTINEL,
        title_fallback=TITLE_FALLBACK,
        description=description,
        category=determine_category(title, f"{description} {address or ''}"),
        image_url=fields.get('image_url'),
        metadata={
            'provider': PROVIDER,
            'fetched': True,
            'address': address,
            'title_truncated': title_truncated,
            'sources': sources,
        },
    )
