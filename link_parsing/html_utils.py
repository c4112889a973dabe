"""
HTML helpers shared by the extractors.

Field extraction is expressed as an ordered list of (name, strategy)
pairs. Each strategy takes the parsed document and returns a value or
None; the first present value wins and its name is kept as provenance.
"""

import re
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup

Strategy = Tuple[str, Callable[[BeautifulSoup], Optional[str]]]

MIDDLE_DOT = '·'


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or '', 'html.parser')


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace; None becomes ''."""
    if not text:
        return ''
    return ' '.join(text.split())


def first_present(soup: BeautifulSoup, strategies: List[Strategy]) -> Tuple[Optional[str], Optional[str]]:
    """
    Run strategies in order until one yields a non-empty value.

    Returns:
        Tuple of (value, strategy_name), or (None, None) if nothing matched
    """
    if soup is None:
        return (None, None)

    for name, strategy in strategies:
        value = strategy(soup)
        if isinstance(value, str):
            value = clean_text(value)
        if value:
            return (value, name)

    return (None, None)


def select_text(selector: str) -> Callable[[BeautifulSoup], Optional[str]]:
    """Strategy: text of the first element matching a CSS selector."""
    def strategy(soup):
        element = soup.select_one(selector)
        return element.get_text(' ', strip=True) if element else None
    return strategy


def select_attr(selector: str, attr: str) -> Callable[[BeautifulSoup], Optional[str]]:
    """Strategy: attribute of the first element matching a CSS selector."""
    def strategy(soup):
        element = soup.select_one(selector)
        if not element:
            return None
        value = element.get(attr)
        # Multi-valued attributes like class come back as lists
        if isinstance(value, list):
            value = ' '.join(value)
        return value
    return strategy


def meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    """Content of a <meta> tag matched by property or name."""
    tag = soup.find('meta', attrs={'property': key}) or soup.find('meta', attrs={'name': key})
    if tag and tag.get('content'):
        return tag['content'].strip()
    return None


def meta_strategy(key: str) -> Callable[[BeautifulSoup], Optional[str]]:
    return lambda soup: meta_content(soup, key)


def extract_social_meta(soup: BeautifulSoup) -> dict:
    """
    Collect Open Graph tags, with Twitter Card tags as fallback.

    Keys have their prefix stripped: og:title -> title.
    """
    data = {}
    if soup is None:
        return data

    # Open Graph first so Twitter Card values only fill gaps
    for prefix in ('og:', 'twitter:'):
        for tag in soup.find_all('meta'):
            key = tag.get('property') or tag.get('name') or ''
            content = tag.get('content')
            if key.startswith(prefix) and content:
                data.setdefault(key[len(prefix):], content.strip())

    return data


def split_on_middle_dot(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split "Place Name · Address" into its two parts."""
    if not text or MIDDLE_DOT not in text:
        return (None, None)

    head, _, tail = text.partition(MIDDLE_DOT)
    head = clean_text(head)
    tail = clean_text(tail)
    if not head or not tail:
        return (None, None)
    return (head, tail)


def find_text_matching(soup: BeautifulSoup, pattern, tags=('span', 'div', 'button', 'a', 'td', 'li')) -> Optional[str]:
    """
    Shortest element text matching a regex.

    Shortest wins so a wrapper div never beats the span it contains.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    matches = []
    for element in soup.find_all(tags):
        text = clean_text(element.get_text(' ', strip=True))
        if text and len(text) <= 200 and regex.search(text):
            matches.append(text)
    return min(matches, key=len) if matches else None
