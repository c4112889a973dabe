"""
HTTP fetching for the Activity Link Parser.

- fetch_webpage: GET a page with a browser User-Agent, bounded timeout and
  bounded redirects. Returns (html, error) and never raises.
- resolve_redirect: for known URL shorteners, follow redirects to find the
  final URL. Best-effort: any failure returns the original URL.
"""

import os
from urllib.parse import urlparse

import requests

# Configuration
USER_AGENT = os.environ.get(
    'LINK_PARSER_USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
REQUEST_TIMEOUT = float(os.environ.get('LINK_PARSER_TIMEOUT', '10'))
MAX_REDIRECTS = int(os.environ.get('LINK_PARSER_MAX_REDIRECTS', '5'))

# Shortener (host, path prefix) pairs that need resolving before classification
SHORTENER_PATTERNS = [
    ('g.co', '/kgs/'),
    ('maps.app.goo.gl', '/'),
    ('goo.gl', '/maps'),
]


class FetchError(Exception):
    """Raised when a page that has no URL-only fallback cannot be fetched."""


def _browser_headers() -> dict:
    return {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.5',
    }


def _get(url: str) -> requests.Response:
    """GET with the configured timeout and redirect limit."""
    with requests.Session() as session:
        session.max_redirects = MAX_REDIRECTS
        return session.get(
            url,
            headers=_browser_headers(),
            timeout=REQUEST_TIMEOUT,
            allow_redirects=True,
        )


def _set_encoding(response: requests.Response) -> None:
    """
    Pick a body encoding when the server didn't declare one.

    requests falls back to ISO-8859-1 for a bare text/html, which garbles
    the star glyphs and middle dots the Maps scraper depends on.
    """
    if 'charset' in response.headers.get('Content-Type', '').lower():
        return
    try:
        response.content.decode('utf-8')
        response.encoding = 'utf-8'
    except UnicodeDecodeError:
        response.encoding = response.apparent_encoding


def fetch_webpage(url: str) -> tuple:
    """Fetch webpage content. Returns (html, error)."""
    try:
        response = _get(url)
        response.raise_for_status()
        _set_encoding(response)

        return response.text, None

    except requests.exceptions.Timeout:
        return None, 'Request timed out'
    except requests.exceptions.TooManyRedirects:
        return None, f'Too many redirects (limit {MAX_REDIRECTS})'
    except requests.exceptions.HTTPError as e:
        return None, f'HTTP error: {e.response.status_code}'
    except requests.exceptions.RequestException as e:
        return None, f'Request failed: {str(e)}'


def is_shortener_url(url: str) -> bool:
    """Check if URL matches a known shortener host and path prefix."""
    if not url:
        return False

    parsed = urlparse(url)
    host = parsed.netloc.lower()
    path = parsed.path or '/'

    for shortener_host, path_prefix in SHORTENER_PATTERNS:
        if (host == shortener_host or host.endswith('.' + shortener_host)) and path.startswith(path_prefix):
            return True
    return False


def resolve_redirect(url: str) -> str:
    """
    Return the final URL a shortener redirects to.

    Non-shortener URLs are returned unchanged without a network call.
    """
    if not is_shortener_url(url):
        return url

    try:
        response = _get(url)
        resolved = response.url or url
        if resolved != url:
            print(f"Resolved redirect: {url} -> {resolved}")
        return resolved
    except requests.exceptions.RequestException as e:
        print(f"Redirect resolution failed, using original URL: {e}")
        return url
