"""
Link parsing pipeline: resolve shortener → classify provider → extract.

Each call is independent; nothing is cached or shared between requests.
"""

from .apple_maps import parse_apple_maps
from .classifier import (
    APPLE_MAPS,
    GENERIC,
    GOOGLE_MAPS,
    INSTAGRAM,
    TRIPADVISOR,
    YELP,
    classify_provider,
)
from .fetcher import resolve_redirect
from .generic import parse_generic
from .google_maps import parse_google_maps
from .instagram import parse_instagram
from .tripadvisor import parse_tripadvisor
from .yelp import parse_yelp

EXTRACTORS = {
    GOOGLE_MAPS: parse_google_maps,
    APPLE_MAPS: parse_apple_maps,
    INSTAGRAM: parse_instagram,
    YELP: parse_yelp,
    TRIPADVISOR: parse_tripadvisor,
    GENERIC: parse_generic,
}


def parse_activity_link(url: str) -> dict:
    """
    Turn a link into an ActivitySuggestion dict.

    Only the Generic extractor can fail (FetchError); every other provider
    degrades to whatever the URL itself reveals.
    """
    url = url.strip()
    resolved_url = resolve_redirect(url)
    provider = classify_provider(resolved_url, original_url=url)
    print(f"Parsing {resolved_url} as {provider}")

    suggestion = EXTRACTORS[provider](resolved_url)

    metadata = suggestion.get('_metadata')
    if metadata is not None:
        metadata['original_url'] = metadata.get('original_url', url)
        metadata['resolved_url'] = resolved_url

    return suggestion
