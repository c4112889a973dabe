"""
Instagram link handling.

Instagram blocks unauthenticated scraping, so the page is never fetched.
The URL is canonicalized and the author pulled from the path; the
suggestion is returned mostly empty with manual_input_required set so the
caller prompts the user for the details.
"""

from typing import Optional
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

from .normalizer import build_manual_input_suggestion

PROVIDER = 'instagram'
SOURCE = 'Instagram'
LOCATION_SENTINEL = 'See Instagram link'
CANONICAL_HOST = 'www.instagram.com'

# Shortener and mobile hosts rewritten to the canonical host
HOST_ALIASES = {'instagr.am', 'www.instagr.am', 'instagram.com', 'm.instagram.com'}

TRACKING_PARAMS = {'igshid', 'igsh'}
TRACKING_PREFIXES = ('utm_',)

# Path roots that are content types, not usernames
NON_USER_ROOTS = {'p', 'reel', 'reels', 'tv', 'explore', 'stories', 'accounts'}


def _is_tracking_param(key: str) -> bool:
    key = key.lower()
    return key in TRACKING_PARAMS or key.startswith(TRACKING_PREFIXES)


def normalize_instagram_url(url: str) -> str:
    """
    Canonicalize host and strip tracking parameters.

    Examples:
        >>> normalize_instagram_url("https://instagr.am/p/ABC123/?utm_source=ig_web&igsh=x")
        'https://www.instagram.com/p/ABC123/'
    """
    parsed = urlparse(url.strip())
    host = parsed.netloc.lower()
    if host in HOST_ALIASES:
        host = CANONICAL_HOST

    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if not _is_tracking_param(k)]

    return urlunparse(parsed._replace(
        scheme='https',
        netloc=host,
        query=urlencode(query),
        fragment='',
    ))


def extract_instagram_username(url: str) -> Optional[str]:
    """Author from /<user>/... or /stories/<user>/...; None for /p/, /reel/, /tv/."""
    parts = [part for part in urlparse(url).path.split('/') if part]
    if not parts:
        return None

    if parts[0] == 'stories':
        return parts[1] if len(parts) > 1 else None

    if parts[0].lower() in NON_USER_ROOTS:
        return None

    return parts[0]


def detect_content_kind(url: str) -> str:
    parts = [part for part in urlparse(url).path.split('/') if part]
    root = parts[0].lower() if parts else ''
    return {
        'p': 'post',
        'reel': 'reel',
        'reels': 'reel',
        'tv': 'video',
        'stories': 'story',
    }.get(root, 'profile' if root else 'post')


def instagram_fallback_suggestion(url: str) -> dict:
    """Fixed suggestion used when anything goes wrong on this path."""
    return build_manual_input_suggestion(
        url=url,
        title='Instagram Activity',
        description='Add the details for this Instagram post manually',
        location=LOCATION_SENTINEL,
        source=SOURCE,
        metadata={'provider': PROVIDER, 'fetched': False, 'fallback': True},
    )


def parse_instagram(url: str) -> dict:
    """Build a manual-input suggestion for an Instagram link. Never raises."""
    try:
        canonical_url = normalize_instagram_url(url)
        username = extract_instagram_username(canonical_url)
        kind = detect_content_kind(canonical_url)

        if username:
            title = f"Instagram {kind} by @{username}"
            description = f"Shared by @{username} on Instagram. Add the activity details manually."
        else:
            title = f"Instagram {kind}"
            description = 'Shared on Instagram. Add the activity details manually.'

        return build_manual_input_suggestion(
            url=canonical_url,
            title=title,
            description=description,
            location=LOCATION_SENTINEL,
            source=SOURCE,
            metadata={
                'provider': PROVIDER,
                'fetched': False,
                'username': username,
                'content_kind': kind,
                'original_url': url,
            },
        )
    except Exception as e:
        print(f"Instagram parse error, returning fallback: {e}")
        return instagram_fallback_suggestion(url)
