"""
Shared pytest fixtures for Activity Link Parser tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path
from bs4 import BeautifulSoup

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load the Cloud Function module with a unique name at module load time
_link_parser_module = _load_module_from_path(
    'link_parser_main',
    PROJECT_ROOT / 'link-parser' / 'main.py'
)


# ============================================================================
# Cloud Function Fixtures
# ============================================================================

@pytest.fixture
def parse_link():
    """Returns main entry point from link-parser."""
    return _link_parser_module.parse_link


@pytest.fixture
def assemble_response():
    """Returns assemble_response function from link-parser."""
    return _link_parser_module.assemble_response


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


# ============================================================================
# HTML Fixtures
# ============================================================================

@pytest.fixture
def google_maps_place_html():
    """A Google Maps place page as served to a non-JS client."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Canada's Wonderland - Google Maps</title>
        <meta property="og:title" content="Canada's Wonderland · 1 Canada's Wonderland Dr, Concord, ON L4K 2E3">
        <meta property="og:description" content="★★★★☆ · Amusement park">
        <meta property="og:image" content="https://lh5.googleusercontent.com/p/AF1QipN=w900-h900-k-no">
        <meta name="name" content="Canada's Wonderland · 1 Canada's Wonderland Dr, Concord, ON L4K 2E3">
    </head>
    <body>
        <div aria-label="Hours: Open ⋅ Closes 10 PM">Open ⋅ Closes 10 PM</div>
    </body>
    </html>
    """


@pytest.fixture
def google_search_html():
    """A google.com/search results page with a local knowledge panel."""
    return """
    <html>
    <head><title>joe's pizza - Google Search</title></head>
    <body>
        <div data-attrid="title">Joe's Pizza</div>
        <div data-attrid="subtitle">Pizza restaurant</div>
        <span aria-label="Rated 4.5 out of 5,">4.5</span>
        <div data-attrid="kc:/location/location:address">Address: 7 Carmine St, New York, NY 10014</div>
        <div data-attrid="kc:/location/location:hours">Hours: Open ⋅ Closes 4 AM</div>
    </body>
    </html>
    """


@pytest.fixture
def yelp_html():
    """A Yelp business page with legacy markup."""
    return """
    <html>
    <head><meta property="og:image" content="https://s3-media0.fl.yelpcdn.com/assets/logo.png"></head>
    <body>
        <h1 data-font-weight="semibold">Le Bernardin</h1>
        <div class="i-stars" title="4.5 star rating"></div>
        <span class="street-address">155 W 51st St</span>
        <span class="locality">New York,</span>
        <span class="region">NY</span>
        <span class="price-range">$$$</span>
        <span class="category-str-list"><a href="/c/nyc/seafood">Seafood</a></span>
        <div class="photo-box"><img src="https://s3-media0.fl.yelpcdn.com/bphoto/abc/o.jpg"></div>
    </body>
    </html>
    """


@pytest.fixture
def tripadvisor_html():
    """A TripAdvisor attraction page with a bubble rating."""
    return """
    <html>
    <body>
        <div class="ui_breadcrumbs"><a>United States</a><a>Things to Do</a><a>Museums</a></div>
        <h1 data-automation="mainH1">The Metropolitan Museum of Art</h1>
        <span class="ui_bubble_rating bubble_45"></span>
        <span class="format_address">1000 5th Ave, New York City, NY 10028</span>
        <p class="partial_entry">An incredible collection covering five thousand years of art from every corner of the world.</p>
    </body>
    </html>
    """


@pytest.fixture
def generic_html():
    """A generic event page."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Summer Concert Series | City Events</title>
        <meta property="og:title" content="Summer Concert Series in the Park">
        <meta property="og:description" content="Free live music every Friday evening all summer long.">
        <meta property="og:image" content="/images/concert.jpg">
    </head>
    <body>
        <h1>Summer Concert Series</h1>
        <address>100 Main St, Springfield</address>
        <p>Bring a blanket and enjoy the show.</p>
    </body>
    </html>
    """


@pytest.fixture
def empty_soup():
    """Returns empty BeautifulSoup."""
    return BeautifulSoup("", 'html.parser')
