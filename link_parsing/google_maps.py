"""
Google Maps link extraction.

Two passes are combined:
1. URL-structural: place name, embedded address and coordinates parsed
   from the URL itself. Always available.
2. Scrape: Open Graph tags, the "Place · Address" name meta tag,
   star-glyph ratings, knowledge-panel markup and address/image
   heuristics. Best-effort; a failed fetch leaves only pass 1.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse, parse_qs, unquote_plus

from .fetcher import fetch_webpage
from .html_utils import (
    MIDDLE_DOT,
    parse_html,
    clean_text,
    first_present,
    select_text,
    select_attr,
    meta_content,
    extract_social_meta,
    split_on_middle_dot,
    find_text_matching,
)
from .normalizer import (
    build_suggestion,
    determine_category,
    enhance_google_image_url,
    rating_to_excitement,
)

PROVIDER = 'google_maps'
LOCATION_SENTINEL = 'See Google Maps link'
TITLE_FALLBACK = 'Location from Google Maps'
DESCRIPTION_FALLBACK = 'Location found on Google Maps'

STAR = '★'
STAR_GLYPHS = '★☆'

STREET_SUFFIXES = (
    r'(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Way|Court|Ct|'
    r'Place|Pl|Parkway|Pkwy|Highway|Hwy|Terrace|Ter|Circle|Cir|Square|Sq)'
)

# "<digits> <up to 4 words> <suffix> [W] [Suite 100][, more, segments]" at the end of a name
EMBEDDED_ADDRESS_RE = re.compile(
    r'\b(\d+[A-Za-z]?\s+(?:[\w.\'-]+\s+){0,4}?' + STREET_SUFFIXES + r'\b\.?'
    r'(?:\s+(?:N|S|E|W|NE|NW|SE|SW)\b\.?)?'
    r'(?:\s+(?:Suite|Ste|Unit|Apt)\.?\s*#?\s*\w+|\s*#\s*\w+)?'
    r'(?:\s*,\s*[^,]+)*)\s*$',
    re.IGNORECASE,
)

COORDINATES_RE = re.compile(r'@(-?\d+\.?\d*),(-?\d+\.?\d*)')

# Street number ... state code + ZIP
US_ADDRESS_RE = re.compile(r'\d+\s+[^,]+,.*\b[A-Z]{2}\s+\d{5}(?:-\d{4})?\b')
# Street number ... Canadian postal code (A1A 1A1)
CA_ADDRESS_RE = re.compile(r'\d+\s+[^,]+,.*\b[A-Z]\d[A-Z]\s?\d[A-Z]\d\b')
# Loose fallback: "123 Something, Somewhere"
LOOSE_ADDRESS_RE = re.compile(r'^\d+\s+[^,]{3,},\s*[^,]{2,}')

HOURS_TEXT_RE = re.compile(
    r'^(?:Open|Closed|Opens|Closes)\b.*\d{1,2}(?::\d{2})?\s?(?:AM|PM|am|pm)'
)

DECIMAL_RATING_RE = re.compile(r'(?<![\d.,])(\d[.,]\d)(?![\d.,])')
BUSINESS_TYPE_RE = re.compile(r'[★☆]+[^·]*·\s*([^·]+)')

MAPS_IMAGE_HOSTS = ['streetviewpixels', 'googleusercontent.com', 'maps.googleapis.com']
RAW_GOOGLEUSERCONTENT_RE = re.compile(r'https://lh\d+\.googleusercontent\.com/[^\s"\'\\<>)]+')

MIN_HOURS_LENGTH = 5
MAX_HOURS_LENGTH = 100


# ============================================================================
# URL-structural pass
# ============================================================================

def clean_place_name(name: Optional[str]) -> Optional[str]:
    """Decode and tidy a place name taken from a URL."""
    if not name:
        return None

    name = unquote_plus(name)
    name = re.sub(r'@.*$', '', name)
    name = name.replace('+', ' ')
    name = ' '.join(name.split())
    name = name.rstrip(', ').strip()
    return name or None


def split_embedded_address(name: str) -> Tuple[str, Optional[str]]:
    """
    Split "Place Name, 123 Main St, City" into name and address.

    Examples:
        >>> split_embedded_address("Joe's Pizza, 7 Carmine St, New York, NY 10014")
        ("Joe's Pizza", '7 Carmine St, New York, NY 10014')

        >>> split_embedded_address("Central Park")
        ('Central Park', None)
    """
    match = EMBEDDED_ADDRESS_RE.search(name)
    if not match:
        return (name, None)

    address = match.group(1).strip()
    place = name[:match.start()].rstrip(' ,-').strip()

    # The whole name was an address
    if not place:
        return (name, address)

    return (place, address)


def parse_coordinates(url: str) -> Optional[dict]:
    match = COORDINATES_RE.search(unquote_plus(url))
    if not match:
        return None
    try:
        return {'lat': float(match.group(1)), 'lng': float(match.group(2))}
    except ValueError:
        return None


def extract_from_google_maps_url(url: str) -> dict:
    """
    Extract place name, address and coordinates from a Google Maps URL.

    Recognized formats, in priority order:
        /maps/place/<Name>/@lat,lng,zoom
        /maps/search/<Query>
        ?q=<Query>
        .../place/<Name>@...
    """
    result = {
        'place_name': None,
        'address': None,
        'coordinates': None,
        'format': None,
    }

    if not url:
        return result

    parsed = urlparse(url)
    path = parsed.path

    place_match = re.search(r'/maps/place/([^/@]+)', path)
    search_match = re.search(r'/maps/search/([^/@]+)', path)
    query = parse_qs(parsed.query).get('q')

    raw_name = None
    if place_match:
        raw_name, result['format'] = place_match.group(1), 'place'
    elif search_match:
        raw_name, result['format'] = search_match.group(1), 'search'
    elif query and query[0].strip():
        # Already decoded by parse_qs; re-escape % so cleaning doesn't decode twice
        raw_name, result['format'] = query[0].replace('%', '%25'), 'query'
    else:
        parts = path.split('/')
        for i, part in enumerate(parts[:-1]):
            if part == 'place' and parts[i + 1]:
                raw_name, result['format'] = parts[i + 1].split('@')[0], 'place_segment'
                break

    name = clean_place_name(raw_name)
    if name:
        name, address = split_embedded_address(name)
        result['place_name'] = name
        result['address'] = address

    result['coordinates'] = parse_coordinates(url)

    return result


# ============================================================================
# Scrape pass
# ============================================================================

def parse_star_rating(text: Optional[str]) -> float:
    """
    Rating from a description like "★★★★☆ · Restaurant".

    Counts filled star glyphs when present, otherwise takes the first
    decimal number. Capped at 5.
    """
    if not text:
        return 0.0

    stars = text.count(STAR)
    if stars:
        return float(min(stars, 5))

    match = DECIMAL_RATING_RE.search(text)
    if match:
        return min(float(match.group(1).replace(',', '.')), 5.0)

    return 0.0


def parse_business_type(text: Optional[str]) -> Optional[str]:
    """Business type following the star run: "★★★★☆ · Amusement park"."""
    if not text:
        return None
    match = BUSINESS_TYPE_RE.search(text)
    if not match:
        return None
    return clean_text(match.group(1)) or None


def _strip_label(prefix: str, strategy):
    """Wrap a strategy to drop an ARIA prefix like "Address: "."""
    def wrapped(soup):
        value = strategy(soup)
        if value:
            value = re.sub(rf'^\s*{prefix}:?\s*', '', value, flags=re.IGNORECASE)
        return value
    return wrapped


def _maps_host_image(soup):
    for img in soup.find_all('img'):
        src = img.get('src') or img.get('data-src') or ''
        if src.startswith('//'):
            src = 'https:' + src
        if src.startswith('http') and any(host in src for host in MAPS_IMAGE_HOSTS):
            return src
    return None


TITLE_STRATEGIES = [
    ('h1', select_text('h1')),
    ('data_attrid_title', select_text('[data-attrid="title"]')),
    ('title_tag', lambda soup: re.sub(r'\s*-\s*Google Maps\s*$', '', soup.title.get_text()) if soup.title else None),
]

ADDRESS_STRATEGIES = [
    ('data_item_address', select_text('[data-item-id="address"]')),
    ('data_value_address', select_text('[data-value="address"]')),
    ('itemprop_address', select_text('[itemprop="address"]')),
    ('aria_label_address', _strip_label('Address', select_attr('[aria-label^="Address"]', 'aria-label'))),
    ('us_postal_pattern', lambda soup: find_text_matching(soup, US_ADDRESS_RE)),
    ('ca_postal_pattern', lambda soup: find_text_matching(soup, CA_ADDRESS_RE)),
    ('comma_text', lambda soup: find_text_matching(soup, LOOSE_ADDRESS_RE)),
]

HOURS_STRATEGIES = [
    ('data_attrid_hours', select_text('[data-attrid="kc:/location/location:hours"]')),
    ('data_item_hours', select_attr('[data-item-id="oh"]', 'aria-label')),
    ('aria_label_hours', _strip_label('Hours', select_attr('[aria-label^="Hours"]', 'aria-label'))),
    ('hours_text', lambda soup: find_text_matching(soup, HOURS_TEXT_RE)),
]

IMAGE_STRATEGIES = [
    ('maps_image_host', _maps_host_image),
    ('hero_photo', select_attr('button[jsaction*="heroHeaderImage"] img', 'src')),
    ('photo_index', select_attr('[data-photo-index] img', 'src')),
    ('section_hero', select_attr('.section-hero-header-image img', 'src')),
]

# Knowledge-panel markup on google.com/search result pages
SEARCH_PANEL_STRATEGIES = {
    'title': [
        ('panel_title', select_text('[data-attrid="title"]')),
        ('panel_heading', select_text('div[role="heading"][aria-level="2"]')),
    ],
    'address': [
        ('panel_address', _strip_label('Address', select_text('[data-attrid="kc:/location/location:address"]'))),
    ],
    'rating': [
        ('panel_rating_aria', select_attr('span[aria-label^="Rated"]', 'aria-label')),
        ('panel_rating', select_text('[data-attrid="kc:/collection/knowledge_panels/local_reviewable:star_score"]')),
    ],
    'business_type': [
        ('panel_subtitle', select_text('[data-attrid="subtitle"]')),
    ],
    'hours': [
        ('panel_hours', _strip_label('Hours', select_text('[data-attrid="kc:/location/location:hours"]'))),
    ],
}


def is_generic_title(title: Optional[str]) -> bool:
    """Titles like "Google Maps" carry no place information."""
    if not title:
        return True
    lowered = title.strip().lower()
    return 'google maps' in lowered or lowered == 'google'


def scrape_google_maps_page(html: str, url: str = '') -> Tuple[dict, dict]:
    """
    Scrape a fetched Google Maps (or Google search) page.

    Returns:
        Tuple of (fields, sources). fields may hold title, address,
        description, rating, business_type, hours and image_url; sources
        maps each found field to the strategy that produced it.
    """
    soup = parse_html(html)
    social = extract_social_meta(soup)
    fields = {}
    sources = {}

    def found(field, value, source):
        if value and not fields.get(field):
            fields[field] = value
            sources[field] = source

    found('title', social.get('title'), 'og:title')

    description = social.get('description') or meta_content(soup, 'description')
    found('description', description, 'og:description' if social.get('description') else 'meta_description')

    # <meta name="name" content="Place Name · Address">
    name_title, name_address = split_on_middle_dot(meta_content(soup, 'name'))
    if name_address:
        found('address', name_address, 'meta_name')
        title = fields.get('title')
        if is_generic_title(title) or MIDDLE_DOT in title:
            fields['title'] = name_title
            sources['title'] = 'meta_name'
    else:
        og_title, og_address = split_on_middle_dot(fields.get('title'))
        if og_address:
            fields['title'] = og_title
            sources['title'] = 'og:title_split'
            found('address', og_address, 'og:title_split')

    rating = parse_star_rating(fields.get('description'))
    if rating:
        found('rating', rating, 'description_stars' if STAR in fields['description'] else 'description_decimal')

    found('business_type', parse_business_type(fields.get('description')), 'description')

    if '/search' in urlparse(url).path:
        for field, strategies in SEARCH_PANEL_STRATEGIES.items():
            if fields.get(field):
                continue
            value, source = first_present(soup, strategies)
            if field == 'rating':
                value = parse_star_rating(value) if value else None
            found(field, value, source)

    if is_generic_title(fields.get('title')):
        value, source = first_present(soup, TITLE_STRATEGIES)
        if value and not is_generic_title(value):
            fields['title'] = value
            sources['title'] = source

    if not fields.get('address'):
        value, source = first_present(soup, ADDRESS_STRATEGIES)
        found('address', value, source)

    if not fields.get('hours'):
        value, source = first_present(soup, HOURS_STRATEGIES)
        found('hours', value, source)

    image = social.get('image')
    if image:
        found('image_url', image, 'og:image')
    else:
        value, source = first_present(soup, IMAGE_STRATEGIES)
        if not value:
            match = RAW_GOOGLEUSERCONTENT_RE.search(html or '')
            if match:
                value, source = match.group().replace('&amp;', '&'), 'raw_googleusercontent'
        found('image_url', value, source)

    if fields.get('image_url'):
        fields['image_url'] = enhance_google_image_url(fields['image_url'])

    return fields, sources


# ============================================================================
# Merge
# ============================================================================

def is_usable_description(description: Optional[str]) -> bool:
    """Scraped Google descriptions are usually a star line or boilerplate."""
    if not description:
        return False
    if any(glyph in description for glyph in STAR_GLYPHS):
        return False
    return 'google maps' not in description.lower()


def synthesize_description(business_type: Optional[str], rating: float, excitement: int,
                           address: Optional[str], hours: Optional[str]) -> str:
    if business_type and excitement:
        description = f"{business_type} rated {rating:g}/5 on Google Maps (excitement {excitement}/10)"
    elif business_type and rating:
        description = f"{business_type} rated {rating:g}/5 on Google Maps"
    elif business_type and address:
        description = f"{business_type} at {address}"
    elif business_type:
        description = f"{business_type} found on Google Maps"
    elif address:
        description = f"{DESCRIPTION_FALLBACK}: {address}"
    else:
        description = DESCRIPTION_FALLBACK

    if hours and MIN_HOURS_LENGTH <= len(hours) <= MAX_HOURS_LENGTH:
        description += f". Hours: {hours}"

    return description


def merge_google_maps(url: str, url_info: dict, scraped: dict, sources: dict,
                      fetch_error: Optional[str] = None) -> dict:
    """Combine URL and scrape passes into a suggestion."""
    place_name = url_info.get('place_name')
    scraped_title = scraped.get('title')

    if place_name and not (scraped_title and 'Google Maps' in scraped_title):
        title, title_source = place_name, 'url'
    elif scraped_title and not is_generic_title(scraped_title):
        title, title_source = scraped_title, sources.get('title')
    elif place_name:
        title, title_source = place_name, 'url'
    else:
        title, title_source = TITLE_FALLBACK, 'fallback'

    if scraped.get('address'):
        address, address_source = scraped['address'], sources.get('address')
    elif url_info.get('address'):
        address, address_source = url_info['address'], 'url'
    else:
        address, address_source = None, 'fallback'

    rating = scraped.get('rating') or 0
    excitement = rating_to_excitement(rating)
    business_type = scraped.get('business_type')
    hours = scraped.get('hours')

    if is_usable_description(scraped.get('description')):
        description, description_source = scraped['description'], sources.get('description')
    else:
        description = synthesize_description(business_type, rating, excitement, address, hours)
        description_source = 'synthesized'

    category = determine_category(title, f"{address or ''} {business_type or ''}")

    field_sources = dict(sources)
    field_sources.update({
        'title': title_source,
        'address': address_source,
        'description': description_source,
    })

    metadata = {
        'provider': PROVIDER,
        'fetched': fetch_error is None,
        'fetch_error': fetch_error,
        'url_format': url_info.get('format'),
        'coordinates': url_info.get('coordinates'),
        'rating': rating,
        'business_type': business_type,
        'hours': hours,
        'sources': field_sources,
    }

    return build_suggestion(
        url=url,
        title=title,
        location_sentinel=LOCATION_SENTINEL,
        title_fallback=TITLE_FALLBACK,
        description=description,
        category=category,
        location=address,
        image_url=scraped.get('image_url'),
        rating=rating,
        metadata=metadata,
    )


def parse_google_maps(url: str) -> dict:
    """Parse a Google Maps link. Never raises on fetch or scrape failure."""
    url_info = extract_from_google_maps_url(url)

    scraped, sources = {}, {}
    html, fetch_error = fetch_webpage(url)

    if fetch_error:
        print(f"Google Maps scrape failed, using URL extraction only: {fetch_error}")
    else:
        try:
            scraped, sources = scrape_google_maps_page(html, url)
        except Exception as e:
            print(f"Google Maps parse error, using URL extraction only: {e}")
            fetch_error = f'Parse failed: {str(e)}'

    return merge_google_maps(url, url_info, scraped, sources, fetch_error)
