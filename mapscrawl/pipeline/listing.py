"""
List pass: read every rendered listing summary in one go.

The results feed's markup is pulled with a single ``evaluate`` call and
parsed offline with selectolax, so this stage never waits, clicks or
otherwise touches the page.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin

from selectolax.parser import HTMLParser, Node

from ..config import LabelSettings, SelectorSettings
from ..schemas import BusinessCandidate
from .drivers.base import PageDriver


OUTER_HTML_JS = """
(selector) => {
    const el = document.querySelector(selector);
    return el ? el.outerHTML : null;
}
"""

_DIGIT_RE = re.compile(r"\d")


def looks_like_address(text: str, keywords: Iterable[str]) -> bool:
    if not text:
        return False
    if _DIGIT_RE.search(text):
        return True
    return any(k and k in text for k in keywords)


def pick_address(blocks: Sequence[str], keywords: Iterable[str]) -> Optional[str]:
    """Longest address-looking block; earlier block wins a length tie."""
    keywords = list(keywords)
    best: Optional[str] = None
    for raw in blocks:
        text = (raw or "").strip()
        if not looks_like_address(text, keywords):
            continue
        if best is None or len(text) > len(best):
            best = text
    return best


def _label(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    value = (node.attributes.get("aria-label") or "").strip()
    return value or None


def parse_listing_html(
    html: str,
    *,
    selectors: Optional[SelectorSettings] = None,
    labels: Optional[LabelSettings] = None,
    base_url: Optional[str] = None,
) -> List[BusinessCandidate]:
    selectors = selectors or SelectorSettings()
    labels = labels or LabelSettings()
    parser = HTMLParser(html)
    candidates: List[BusinessCandidate] = []
    for article in parser.css(selectors.articles):
        link = article.css_first(selectors.business_link)
        if link is None:
            continue
        name = _label(article) or _label(link)
        if not name:
            continue
        blocks = [(el.text() or "") for el in article.css(selectors.address_elements)]
        href = (link.attributes.get("href") or "").strip()
        reference = None
        if href:
            reference = urljoin(base_url, href) if base_url else href
        candidates.append(BusinessCandidate(
            name=name,
            address=pick_address(blocks, labels.address_keywords),
            phone=None,
            listing_reference=reference,
        ))
    return candidates


class ListingExtractor:
    def __init__(
        self,
        driver: PageDriver,
        *,
        selectors: Optional[SelectorSettings] = None,
        labels: Optional[LabelSettings] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.driver = driver
        self.selectors = selectors or SelectorSettings()
        self.labels = labels or LabelSettings()
        self.base_url = base_url

    def extract(self) -> List[BusinessCandidate]:
        print("🔎 Extracting business listings...")
        try:
            html = self.driver.evaluate(OUTER_HTML_JS, self.selectors.feed)
            if not html:
                print("  ℹ️  Results feed not present; nothing to extract")
                return []
            candidates = parse_listing_html(
                html,
                selectors=self.selectors,
                labels=self.labels,
                base_url=self.base_url,
            )
        except Exception as e:
            print(f"  ⚠️  Listing extraction failed: {e}")
            return []
        print(f"  Found {len(candidates)} listings")
        return candidates
