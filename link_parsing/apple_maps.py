"""Apple Maps link extraction. URL parameters only, no page fetch."""

import re
from urllib.parse import urlparse, parse_qs

from .normalizer import build_suggestion

PROVIDER = 'apple_maps'
LOCATION_SENTINEL = 'See Apple Maps link'
TITLE_FALLBACK = 'Location from Apple Maps'

# ", 37.7749, -122.4194" style suffix on a place name
TRAILING_COORDINATES_RE = re.compile(r',?\s*-?\d+\.?\d*\s*,\s*-?\d+\.?\d*\s*$')


def extract_from_apple_maps_url(url: str) -> dict:
    """Place name (q, then place) and coordinates (ll) from an Apple Maps URL."""
    params = parse_qs(urlparse(url).query)

    place_name = None
    source = None
    for key in ('q', 'place'):
        value = params.get(key, [''])[0].strip()
        if value:
            place_name, source = value, key
            break

    if place_name:
        place_name = TRAILING_COORDINATES_RE.sub('', ' '.join(place_name.split())).strip() or None

    ll = params.get('ll', [''])[0].strip() or None

    return {'place_name': place_name, 'coordinates': ll, 'source': source}


def parse_apple_maps(url: str) -> dict:
    info = extract_from_apple_maps_url(url)

    description = 'Location found on Apple Maps'
    if info['coordinates']:
        description += f" (coordinates: {info['coordinates']})"

    return build_suggestion(
        url=url,
        title=info['place_name'],
        location_sentinel=LOCATION_SENTINEL,
        title_fallback=TITLE_FALLBACK,
        description=description,
        metadata={
            'provider': PROVIDER,
            'fetched': False,
            'coordinates': info['coordinates'],
            'sources': {'title': info['source'] or 'fallback'},
        },
    )
