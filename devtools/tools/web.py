"""Web tools — fetch a URL and scrape a search results page.

Neither tool runs a model over the content: WebFetch returns the cleaned
page alongside the prompt, WebSearch returns raw result snippets.
"""

import json
import logging
import re
from typing import Annotated, Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup
from pydantic import Field

from devtools.core import (
    SEARCH_URL,
    WEB_MAX_CONTENT,
    WEB_MAX_REDIRECTS,
    WEB_MAX_RESULTS,
    WEB_TIMEOUT,
    WEB_USER_AGENT,
)

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": WEB_USER_AGENT}
_STRIP_TAGS = ["script", "style", "nav", "header", "footer", "aside"]
_WS_RE = re.compile(r"\s+")


def _upgrade(url: str) -> str:
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def _text(element) -> str:
    return _WS_RE.sub(" ", element.get_text(" ")).strip()


def html_to_text(html: str) -> str:
    """Body text (whitespace collapsed) followed by headings, paragraphs and list items."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_STRIP_TAGS):
        tag.decompose()

    content = _text(soup.body or soup)

    for heading in soup.find_all(re.compile(r"^h[1-6]$")):
        level = int(heading.name[1])
        content += f"\n{'#' * level} {_text(heading)}\n"
    for para in soup.find_all("p"):
        content += f"\n{_text(para)}\n"
    for item in soup.find_all("li"):
        content += f"\n- {_text(item)}"
    return content


def _format_body(resp) -> str:
    content_type = resp.headers.get("Content-Type", "")
    if "application/json" in content_type:
        try:
            return json.dumps(resp.json(), indent=2)
        except ValueError:
            logger.debug(f"Body labelled JSON did not parse: {resp.url}")
            return resp.text
    if "text/html" in content_type:
        return html_to_text(resp.text)
    return resp.text


def web_fetch(
    url: Annotated[str, Field(description="The URL to fetch content from")],
    prompt: Annotated[str, Field(description="The prompt to run on the fetched content")],
) -> str:
    """Fetches content from a specified URL and returns it as text alongside the prompt.

    HTTP URLs are upgraded to HTTPS. Redirects to a different host are reported instead of followed.
    Content longer than 50000 characters is truncated.
    """
    url = _upgrade(url)
    host = urlparse(url).netloc
    logger.info(f"Fetching: {url}")

    try:
        for _ in range(WEB_MAX_REDIRECTS + 1):
            resp = requests.get(url, headers=_HEADERS, timeout=WEB_TIMEOUT, allow_redirects=False)
            if not resp.is_redirect:
                break
            location = urljoin(url, resp.headers["Location"])
            if urlparse(location).netloc != host:
                return (
                    f"Redirect detected to: {location}\n"
                    "Please make a new WebFetch request with the redirect URL."
                )
            url = location
        else:
            raise requests.exceptions.TooManyRedirects(f"Exceeded {WEB_MAX_REDIRECTS} redirects")
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Failed to fetch {url}: {e}")
        raise RuntimeError(f"Failed to fetch URL: {e}") from e

    content = _format_body(resp)
    if len(content) > WEB_MAX_CONTENT:
        content = content[:WEB_MAX_CONTENT] + "... (content truncated)"

    return (
        f"Fetched content from {url}:\n\n{content}\n\n"
        f"Prompt: {prompt}\n\n"
        "Note: the content is returned as-is; no model has processed it."
    )


def _domain_allowed(link: str, allowed_domains, blocked_domains) -> bool:
    if allowed_domains and not any(domain in link for domain in allowed_domains):
        return False
    if blocked_domains and any(domain in link for domain in blocked_domains):
        return False
    return True


def parse_search_results(html: str) -> list[dict]:
    """Extract title/link/snippet triples from a DuckDuckGo HTML results page."""
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for result in soup.find_all("div", class_="result"):
        title_elem = result.find("a", class_="result__a")
        snippet_elem = result.find(class_="result__snippet")
        if not title_elem or not snippet_elem:
            continue
        title = title_elem.get_text(strip=True)
        link = title_elem.get("href", "")
        snippet = snippet_elem.get_text(strip=True)
        if title and link and snippet:
            results.append({"title": title, "link": link, "snippet": snippet})
    return results


def web_search(
    query: Annotated[str, Field(min_length=2, description="The search query to use")],
    allowed_domains: Annotated[Optional[list[str]], Field(description="Only include search results from these domains")] = None,
    blocked_domains: Annotated[Optional[list[str]], Field(description="Never include search results from these domains")] = None,
) -> str:
    """Searches the web and returns up to 10 results (title, link, snippet).

    Simplified: scrapes a public HTML results page rather than calling a search API.
    """
    logger.info(f"Searching: {query}")
    try:
        resp = requests.get(SEARCH_URL, params={"q": query}, headers=_HEADERS, timeout=WEB_TIMEOUT)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Search failed for {query!r}: {e}")
        return (
            "Note: this is a simplified web search that scrapes a public results page. "
            "A production setup would use a proper search API.\n\n"
            f"Search query: {query}\nError: {e}"
        )

    results = [
        r for r in parse_search_results(resp.text)
        if _domain_allowed(r["link"], allowed_domains, blocked_domains)
    ]
    entries = [f"**{r['title']}**\n{r['link']}\n{r['snippet']}\n" for r in results[:WEB_MAX_RESULTS]]
    return f'Search results for "{query}":\n\n' + "\n---\n".join(entries)
