"""
Link Parser Cloud Function

Turns a pasted link into an activity suggestion for the Activity Planner.

Responsibilities:
- Validate the incoming URL
- Resolve shortener redirects and pick the provider extractor
- Return a normalized ActivitySuggestion (title, category, cost, duration...)

Does NOT:
- Store activities (the Activities API does that once the user accepts)
- Cache or retry fetches
- Render JavaScript-only pages
"""

import functions_framework
import json
import os
import sys
import traceback

# Add link_parsing package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from link_parsing.fetcher import FetchError
from link_parsing.normalizer import is_valid_absolute_url
from link_parsing.router import parse_activity_link

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Max-Age': '3600'
}


def assemble_response(suggestion: dict, include_metadata: bool = False) -> dict:
    """Copy of the suggestion for the caller, with debug metadata only on request."""
    response = {key: value for key, value in suggestion.items() if key != '_metadata'}
    if include_metadata and '_metadata' in suggestion:
        response['_metadata'] = suggestion['_metadata']
    return response


@functions_framework.http
def parse_link(request):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "url": "https://www.google.com/maps/place/Central+Park/@40.78,-73.96,15z",
        "options": {
            "debug": false
        }
    }
    """
    if request.method == 'OPTIONS':
        return ('', 204, CORS_HEADERS)

    headers = {'Access-Control-Allow-Origin': '*'}

    try:
        request_json = request.get_json(silent=True)

        url = request_json.get('url') if isinstance(request_json, dict) else None
        if not isinstance(url, str) or not url.strip():
            return (json.dumps({
                'error': 'URL is required'
            }), 400, headers)

        options = request_json.get('options') or {}
        debug = bool(options.get('debug', False)) if isinstance(options, dict) else False

        if not is_valid_absolute_url(url):
            return (json.dumps({
                'error': 'Failed to parse URL',
                'details': f'Invalid URL: {url}'
            }), 500, headers)

        try:
            suggestion = parse_activity_link(url)
        except FetchError as e:
            print(f"Error parsing generic URL {url}: {e}")
            return (json.dumps({
                'error': 'Failed to parse webpage',
                'details': str(e)
            }), 500, headers)

        return (json.dumps(assemble_response(suggestion, include_metadata=debug)), 200, headers)

    except Exception as e:
        print(f"Error parsing URL: {e}")
        traceback.print_exc()
        return (json.dumps({
            'error': 'Failed to parse URL',
            'details': str(e)
        }), 500, headers)
