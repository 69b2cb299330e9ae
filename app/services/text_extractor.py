"""
Plain-text extraction from raw HTML and reader-service markdown
"""
import logging
import re
from typing import Tuple

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Elements dropped together with everything inside them
BOILERPLATE_TAGS = ['script', 'style', 'nav', 'header', 'footer', 'noscript']

_WHITESPACE_RE = re.compile(r'\s+')
_IMAGE_RE = re.compile(r'!\[[^\]]*\]\([^)]*\)')
_LINK_RE = re.compile(r'\[([^\]]*)\]\([^)]*\)')
_HEADING_RE = re.compile(r'^\s{0,3}#{1,6}\s*', re.MULTILINE)
_RULE_RE = re.compile(r'^[ \t]*([-*_=][ \t]*){3,}$', re.MULTILINE)
_EMPHASIS_RE = re.compile(r'(\*{1,3}|_{2,3}|`+)')
_READER_HEADER_RE = re.compile(r'^(Title|URL Source|Published Time|Warning):\s*(.*)$', re.MULTILINE)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(' ', text).strip()


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or '', 'html.parser')


def extract_text_from_html(html: str) -> str:
    """
    Reduce an HTML document to normalized plain text.

    Script, style and page-chrome blocks (nav, header, footer, noscript) are
    removed wholesale, remaining tags are stripped, entities are decoded and
    whitespace runs collapse to single spaces. Malformed markup yields
    whatever text could be recovered, never an exception.
    """
    try:
        soup = _parse(html)

        # Remove unwanted elements
        for element in soup(BOILERPLATE_TAGS):
            element.decompose()

        return normalize_whitespace(soup.get_text(separator=' '))

    except Exception as e:
        logger.warning(f"⚠️  HTML text extraction failed: {str(e)}")
        return ''


def extract_title(html: str) -> str:
    """Document <title> text, or an empty string"""
    try:
        title_tag = _parse(html).find('title')
        return normalize_whitespace(title_tag.get_text()) if title_tag else ''
    except Exception as e:
        logger.warning(f"⚠️  Title extraction failed: {str(e)}")
        return ''


def extract_meta_description(html: str) -> str:
    """Meta description, falling back to og:description"""
    try:
        soup = _parse(html)
        candidates = [
            soup.find('meta', attrs={'name': re.compile(r'^description$', re.I)}),
            soup.find('meta', attrs={'property': re.compile(r'^og:description$', re.I)}),
        ]
        for meta_tag in candidates:
            if meta_tag and meta_tag.get('content', '').strip():
                return normalize_whitespace(meta_tag['content'])
        return ''
    except Exception as e:
        logger.warning(f"⚠️  Meta description extraction failed: {str(e)}")
        return ''


def split_reader_output(text: str) -> Tuple[str, str]:
    """
    Split reader-service output into (title, markdown body).

    The reader prefixes its markdown with "Title:", "URL Source:" header
    lines and a "Markdown Content:" marker.
    """
    title = ''
    match = re.search(r'^Title:\s*(.*)$', text or '', re.MULTILINE)
    if match:
        title = match.group(1).strip()

    marker = 'Markdown Content:'
    if marker in (text or ''):
        body = text.split(marker, 1)[1]
    else:
        body = _READER_HEADER_RE.sub('', text or '')
    return title, body


def extract_text_from_markdown(text: str) -> str:
    """Strip markdown syntax from reader output down to plain text"""
    _, body = split_reader_output(text)
    body = _IMAGE_RE.sub(' ', body)
    body = _LINK_RE.sub(r'\1', body)
    body = _RULE_RE.sub(' ', body)
    body = _HEADING_RE.sub('', body)
    body = _EMPHASIS_RE.sub('', body)
    return normalize_whitespace(body)
