"""
Yelp business page extraction.

Scrapes name, rating, address, price range, category and photo. The price
range clamps the category cost estimate. When the page cannot be fetched
(Yelp often answers bots with 403) the business name comes from the
/biz/<slug> path.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse, urljoin, unquote

from .fetcher import fetch_webpage
from .html_utils import parse_html, clean_text, first_present, select_text, select_attr, meta_strategy
from .normalizer import build_suggestion, determine_category, process_image_url

PROVIDER = 'yelp'
LOCATION_SENTINEL = 'See Yelp link'
TITLE_FALLBACK = 'Yelp Business'
DEFAULT_CATEGORY_TEXT = 'Food & Dining'

# Trailing numeric disambiguator on slugs: joes-pizza-new-york-2
SLUG_SUFFIX_RE = re.compile(r'-\d+$')
IMAGE_REJECT_WORDS = ('icon', 'logo', 'sprite', 'avatar', 'pixel', '.svg', 'data:')

TITLE_STRATEGIES = [
    ('h1_semibold', select_text('h1[data-font-weight="semibold"]')),
    ('h1', select_text('h1')),
    ('biz_page_title', select_text('.biz-page-title')),
    ('testid_business_name', select_text('[data-testid="business-name"]')),
    ('og:title', meta_strategy('og:title')),
]

RATING_STRATEGIES = [
    ('i_stars_title', select_attr('.i-stars', 'title')),
    ('rating_large_aria', select_attr('.rating-large', 'aria-label')),
    ('star_rating_aria', select_attr('[aria-label*="star rating"]', 'aria-label')),
    ('testid_rating', select_text('[data-testid="rating"]')),
]

ADDRESS_STRATEGIES = [
    ('address_parts', lambda soup: ' '.join(
        part for part in (
            select_text('.street-address')(soup),
            select_text('.locality')(soup),
            select_text('.region')(soup),
        ) if part
    )),
    ('address_class', select_text('.address')),
    ('testid_business_address', select_text('[data-testid="business-address"]')),
    ('address_tag', select_text('address')),
]

PRICE_RANGE_STRATEGIES = [
    ('price_range_class', select_text('.price-range')),
    ('testid_price_range', select_text('[data-testid="price-range"]')),
    ('business_attribute_price_range', select_text('.business-attribute-price-range')),
]

CATEGORY_STRATEGIES = [
    ('category_str_list', select_text('.category-str-list a')),
    ('testid_business_categories', select_text('[data-testid="business-categories"] a')),
    ('business_categories', select_text('.business-categories a')),
]

PHOTO_STRATEGIES = [
    ('photo_box', select_attr('.photo-box img', 'src')),
    ('testid_business_photo', select_attr('[data-testid="business-photo"] img', 'src')),
    ('js_business_photo', select_attr('.js-business-photo img', 'src')),
    ('og:image', meta_strategy('og:image')),
]


def parse_rating_text(text: Optional[str]) -> float:
    """First number in "4.5 star rating", capped at 5."""
    if not text:
        return 0.0
    match = re.search(r'(\d+\.?\d*)', text)
    if not match:
        return 0.0
    return min(float(match.group(1)), 5.0)


def is_plausible_image(src: Optional[str]) -> bool:
    if not src:
        return False
    lowered = src.lower()
    return not any(word in lowered for word in IMAGE_REJECT_WORDS)


def find_business_image(soup, page_url: str) -> Tuple[Optional[str], Optional[str]]:
    """First plausible non-icon, non-logo image."""
    value, source = first_present(soup, PHOTO_STRATEGIES)
    if not is_plausible_image(value):
        value, source = None, None
        for img in soup.find_all('img'):
            src = img.get('src') or img.get('data-src')
            if is_plausible_image(src):
                value, source = src, 'first_img'
                break

    if value:
        value = process_image_url(urljoin(page_url, value))
    return value, source


def title_from_yelp_url(url: str) -> Optional[str]:
    """Business name from /biz/<slug>: joes-pizza-new-york -> Joes Pizza New York."""
    match = re.search(r'/biz/([^/?#]+)', urlparse(url).path)
    if not match:
        return None
    slug = SLUG_SUFFIX_RE.sub('', unquote(match.group(1)))
    words = [word for word in slug.split('-') if word]
    return ' '.join(word.capitalize() for word in words) or None


def scrape_yelp_page(html: str, url: str = '') -> Tuple[dict, dict]:
    """Returns (fields, sources) scraped from a Yelp business page."""
    soup = parse_html(html)
    fields, sources = {}, {}

    for field, strategies in (
        ('title', TITLE_STRATEGIES),
        ('rating', RATING_STRATEGIES),
        ('address', ADDRESS_STRATEGIES),
        ('price_range', PRICE_RANGE_STRATEGIES),
        ('category_text', CATEGORY_STRATEGIES),
    ):
        value, source = first_present(soup, strategies)
        if value:
            fields[field] = value
            sources[field] = source

    if 'rating' in fields:
        fields['rating'] = parse_rating_text(fields['rating'])

    image, source = find_business_image(soup, url)
    if image:
        fields['image_url'] = image
        sources['image_url'] = source

    return fields, sources


def parse_yelp(url: str) -> dict:
    """Parse a Yelp link, degrading to the URL slug when the fetch fails."""
    html, fetch_error = fetch_webpage(url)

    fields, sources = {}, {}
    if fetch_error:
        print(f"Yelp scrape failed, using URL extraction only: {fetch_error}")
    else:
        try:
            fields, sources = scrape_yelp_page(html, url)
        except Exception as e:
            print(f"Yelp parse error, using URL extraction only: {e}")
            fetch_error = f'Parse failed: {str(e)}'

    if not fields.get('title'):
        slug_title = title_from_yelp_url(url)
        if slug_title:
            fields['title'] = slug_title
            sources['title'] = 'url_slug'

    title = fields.get('title') or TITLE_FALLBACK
    category_text = fields.get('category_text') or DEFAULT_CATEGORY_TEXT
    address = clean_text(fields.get('address'))

    description = f"{category_text} found on Yelp"
    if address:
        description += f" - {address}"

    return build_suggestion(
        url=url,
        title=title,
        location_sentinel=LOCATION_SENTINEL,
        title_fallback=TITLE_FALLBACK,
        description=description,
        category=determine_category(title, category_text),
        location=address,
        image_url=fields.get('image_url'),
        rating=fields.get('rating', 0),
        price_range=fields.get('price_range'),
        metadata={
            'provider': PROVIDER,
            'fetched': fetch_error is None,
            'fetch_error': fetch_error,
            'rating': fields.get('rating', 0),
            'price_range': fields.get('price_range'),
            'category_text': category_text,
            'sources': sources,
        },
    )
