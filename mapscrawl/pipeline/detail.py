"""
Detail pass: open each listing and re-read phone and address.

List-pass values are unreliable (no phone at all, truncated addresses),
so every candidate gets one click + read round-trip against the detail
pane. A failure on one candidate is logged and the loop moves on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from selectolax.parser import HTMLParser

from ..config import LabelSettings, SelectorSettings
from ..schemas import BusinessCandidate
from .drivers.base import PageDriver
from .waits import FixedDelayWait, WaitStrategy


# Returns outerHTML of every match, one string per selector.
COLLECT_OUTER_HTML_JS = """
(selectors) => selectors.map(sel =>
    Array.from(document.querySelectorAll(sel)).map(el => el.outerHTML).join('')
)
"""

PHONE_SCHEME_RE = re.compile(r"^\s*(?:phone:)?\s*(?:tel:)?", re.IGNORECASE)


@dataclass(frozen=True)
class DetailReading:
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class EnrichStats:
    attempted: int = 0
    enriched: int = 0
    phones: int = 0
    failures: int = 0


def normalize_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    cleaned = PHONE_SCHEME_RE.sub("", value, count=1).strip()
    return cleaned or None


def phone_from_label(label: Optional[str], markers: Iterable[str]) -> Optional[str]:
    """Text after the first phone marker in ``label`` (case-insensitive)."""
    if not label:
        return None
    low = label.lower()
    for marker in markers:
        if not marker:
            continue
        idx = low.find(marker.lower())
        if idx < 0:
            continue
        value = label[idx + len(marker):].strip()
        if value:
            return value
    return None


def strip_address_label(label: Optional[str], prefixes: Sequence[str]) -> Optional[str]:
    if not label:
        return None
    words = sorted((p.strip() for p in prefixes if p and p.strip()), key=len, reverse=True)
    text = label.strip()
    if words:
        pattern = r"^(?:" + "|".join(re.escape(w) for w in words) + r")\s*:\s*"
        text = re.sub(pattern, "", text, count=1, flags=re.IGNORECASE)
    return text.strip() or None


def _nodes(html: Optional[str], selector: str):
    if not html:
        return []
    return HTMLParser(html).css(selector)


def parse_detail_html(
    phone_html: str,
    labelled_html: str,
    address_html: str,
    labels: Optional[LabelSettings] = None,
) -> DetailReading:
    labels = labels or LabelSettings()

    phone = None
    phone_nodes = _nodes(phone_html, "[data-item-id]")
    if phone_nodes:
        phone = normalize_phone(phone_nodes[0].attributes.get("data-item-id"))
    if not phone:
        for node in _nodes(labelled_html, "[aria-label]"):
            phone = phone_from_label(node.attributes.get("aria-label"), labels.phone_markers)
            if phone:
                break

    address = None
    address_nodes = _nodes(address_html, "[aria-label]")
    if address_nodes:
        address = strip_address_label(address_nodes[0].attributes.get("aria-label"), labels.address_prefixes)

    return DetailReading(phone=phone, address=address)


class DetailEnricher:
    def __init__(
        self,
        driver: PageDriver,
        *,
        settle_ms: int,
        selectors: Optional[SelectorSettings] = None,
        labels: Optional[LabelSettings] = None,
        waiter: Optional[WaitStrategy] = None,
    ) -> None:
        self.driver = driver
        self.settle_ms = settle_ms
        self.selectors = selectors or SelectorSettings()
        self.labels = labels or LabelSettings()
        self.waiter = waiter or FixedDelayWait()

    def _open_listing(self, index: int) -> bool:
        # Re-query every time: handles from an earlier read go stale on re-render.
        items = self.driver.find_elements(self.selectors.articles)
        if index >= len(items):
            return False
        links = self.driver.find_elements(self.selectors.business_link, within=items[index])
        if not links:
            return False
        self.driver.click_element(links[0])
        return True

    def read_detail(self) -> DetailReading:
        phone_html, labelled_html, address_html = self.driver.evaluate(
            COLLECT_OUTER_HTML_JS,
            [self.selectors.phone_button, self.selectors.phone_labelled, self.selectors.address_button],
        )
        return parse_detail_html(phone_html, labelled_html, address_html, self.labels)

    def enrich(self, candidates: List[BusinessCandidate]) -> EnrichStats:
        stats = EnrichStats()
        total = len(candidates)
        print(f"📞 Extracting detailed info for {total} businesses...")
        for i, candidate in enumerate(candidates):
            stats.attempted += 1
            print(f"  Processing business {i + 1}/{total}: {candidate.name}")
            try:
                if not self._open_listing(i):
                    print(f"  ⚠️  Listing {i + 1} no longer rendered; keeping list values")
                    stats.failures += 1
                    continue
                self.waiter.wait(self.settle_ms)
                reading = self.read_detail()
                if candidate.apply_detail(phone=reading.phone, address=reading.address):
                    stats.enriched += 1
                if candidate.phone:
                    stats.phones += 1
            except Exception as e:
                stats.failures += 1
                print(f"  ⚠️  Could not extract details for {candidate.name}: {e}")
        return stats
