"""Readable-content extraction for the article reader.

Fetches an article's web page and pulls out its main text, dropping
navigation, scripts and other page furniture, so the reader can show
plain paragraphs.
"""

import asyncio
import logging
import re

import httpx
from bs4 import BeautifulSoup

from . import config
from .models import ReaderContent

STYLE_TAG_RE = re.compile(r"<style\b[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)

# C0 controls other than tab and newline, plus DEL
CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

# Elements that never hold article text
NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside",
              "form", "iframe", "svg", "button", "template"]

BLOCK_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "blockquote"]

MAX_EXCERPT_LENGTH = 200


def _meta_content(soup, **attrs):
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return None


def _find_main_container(soup):
    """Pick the element most likely to hold the article body."""
    for name in ("article", "main"):
        container = soup.find(name)
        if container and container.get_text(strip=True):
            return container

    best, best_score = None, 0
    for candidate in soup.find_all(["div", "section", "td"]):
        score = sum(len(p.get_text(strip=True)) for p in candidate.find_all("p", recursive=False))
        if score > best_score:
            best, best_score = candidate, score

    return best or soup.body or soup


def _clean_text(text):
    """Normalize line endings to \\n, drop other control characters and expand tabs."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return CONTROL_CHAR_RE.sub("", text).expandtabs(4)


def _block_text(container):
    """Join the container's block elements into paragraphs separated by blank lines."""
    blocks = []
    for element in container.find_all(BLOCK_TAGS):
        # Nested blocks (a <p> inside an <li>) are picked up through the outer one
        if element.find_parent(BLOCK_TAGS) is not None:
            continue
        if element.name == "pre":
            text = _clean_text(element.get_text()).strip("\n")
        else:
            text = " ".join(_clean_text(element.get_text(" ", strip=True)).split())
        if text:
            blocks.append(text)

    if blocks:
        return "\n\n".join(blocks)
    return _clean_text(container.get_text("\n", strip=True))


def extract_readable_content(html, url=None):
    """
    Extract the main article content from an HTML document.

    Args:
        html: Page source
        url: Address the page was fetched from (used in log messages)

    Returns:
        ReaderContent or None: None when no text could be found
    """
    soup = BeautifulSoup(STYLE_TAG_RE.sub("", html), "html.parser")

    title = _meta_content(soup, property="og:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()
    if not title:
        heading = soup.find("h1")
        title = heading.get_text(" ", strip=True) if heading else ""

    byline = _meta_content(soup, name="author")
    site_name = _meta_content(soup, property="og:site_name")
    excerpt = _meta_content(soup, name="description") or _meta_content(soup, property="og:description")

    for tag in soup.find_all(NOISE_TAGS):
        # Already removed along with a noisy ancestor
        if tag.decomposed:
            continue
        tag.decompose()

    container = _find_main_container(soup)
    text_content = _block_text(container)
    if not text_content.strip():
        logging.info(f"No readable text found at {url}")
        return None

    if not excerpt:
        first_paragraph = container.find("p")
        if first_paragraph:
            excerpt = " ".join(first_paragraph.get_text(" ", strip=True).split())[:MAX_EXCERPT_LENGTH]

    return ReaderContent(
        title=title,
        content=str(container),
        text_content=text_content,
        excerpt=excerpt or "",
        byline=byline,
        site_name=site_name,
    )


async def fetch_readable_content(url, client=None):
    """
    Download a page and extract its readable content.

    Never raises: network errors, bad statuses and parse failures are
    logged and reported as None.

    Args:
        url: Article URL
        client: Optional httpx.AsyncClient to reuse

    Returns:
        ReaderContent or None
    """
    headers = {"User-Agent": config.USER_AGENT}
    try:
        if client is not None:
            response = await client.get(url, headers=headers, follow_redirects=True,
                                        timeout=config.CONTENT_FETCH_TIMEOUT)
        else:
            async with httpx.AsyncClient() as tmp_client:
                response = await tmp_client.get(url, headers=headers, follow_redirects=True,
                                                timeout=config.CONTENT_FETCH_TIMEOUT)
        response.raise_for_status()
        return await asyncio.to_thread(extract_readable_content, response.text, url)
    except httpx.HTTPError as e:
        logging.warning(f"Failed to fetch readable content from {url}: {e}")
        return None
    except Exception as e:
        logging.error(f"Failed to parse readable content from {url}: {e}", exc_info=True)
        return None
