"""Provider classification for activity links."""

from urllib.parse import urlparse

from .fetcher import is_shortener_url

GOOGLE_MAPS = 'google_maps'
APPLE_MAPS = 'apple_maps'
INSTAGRAM = 'instagram'
YELP = 'yelp'
TRIPADVISOR = 'tripadvisor'
GENERIC = 'generic'

PROVIDERS = (GOOGLE_MAPS, APPLE_MAPS, INSTAGRAM, YELP, TRIPADVISOR, GENERIC)

# Host patterns, checked in this order after Google Maps
APPLE_MAPS_PATTERNS = ['maps.apple.com']
INSTAGRAM_PATTERNS = ['instagram.com', 'instagr.am']
YELP_PATTERNS = ['yelp.com']
TRIPADVISOR_PATTERNS = ['tripadvisor.com']


def is_google_maps_url(host: str, path: str) -> bool:
    """Google Maps place/search pages share google.com with plain web search."""
    if 'google.com' in host and ('/maps' in path or '/search' in path):
        return True
    return 'maps.google' in host or 'goo.gl' in host


def classify_provider(url: str, original_url: str = None) -> str:
    """
    Select the extraction strategy for a (resolved) URL.

    First match wins. Instagram is checked before the review sites because
    it needs manual-input handling rather than scraping.
    """
    parsed = urlparse(url)
    host = parsed.netloc.lower()
    path = parsed.path

    if is_google_maps_url(host, path) or (original_url and is_shortener_url(original_url)):
        return GOOGLE_MAPS

    for patterns, provider in (
        (APPLE_MAPS_PATTERNS, APPLE_MAPS),
        (INSTAGRAM_PATTERNS, INSTAGRAM),
        (YELP_PATTERNS, YELP),
        (TRIPADVISOR_PATTERNS, TRIPADVISOR),
    ):
        for pattern in patterns:
            if pattern in host:
                return provider

    return GENERIC
