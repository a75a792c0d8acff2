from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import json
import os
import time

from ..config import CrawlerSettings
from ..ops_logger import OpsLogger
from ..schemas import BusinessCandidate, BusinessRecord, SearchQuery
from .consent import ConsentResolver
from .dedupe import dedupe_candidates
from .detail import DetailEnricher, EnrichStats
from .drivers.base import PageDriver
from .listing import ListingExtractor
from .scroll import ScrollConvergenceEngine, ScrollOutcome
from .waits import FixedDelayWait, WaitStrategy


FEED_PRESENT_JS = "(selector) => document.querySelector(selector) !== null"

# encodeURIComponent leaves these unescaped as well
_URI_COMPONENT_SAFE = "!*'()"


def build_search_url(query: SearchQuery, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{quote(query.text, safe=_URI_COMPONENT_SAFE)}"


@dataclass
class SearchResult:
    """Outcome of one search: unique businesses plus per-stage diagnostics."""
    query: SearchQuery
    url: str
    businesses: List[BusinessCandidate] = field(default_factory=list)
    feed_found: bool = False
    consent_accepted: bool = False
    listed: int = 0
    scroll: Optional[ScrollOutcome] = None
    enrich: Optional[EnrichStats] = None
    status_code: Optional[int] = None
    ops_record: Dict[str, Any] = field(default_factory=dict)

    def records(self) -> List[BusinessRecord]:
        return [BusinessRecord.from_candidate(c) for c in self.businesses]


class MapsSearchPipeline:
    """Consent -> scroll -> list pass -> detail pass -> dedupe.

    Only a failed initial navigation (NavigationError) escapes
    :meth:`search`; every later stage degrades to partial data.
    """

    def __init__(
        self,
        driver: PageDriver,
        settings: Optional[CrawlerSettings] = None,
        *,
        waiter: Optional[WaitStrategy] = None,
        ops_logger: Optional[OpsLogger] = None,
    ) -> None:
        self.driver = driver
        self.settings = settings or CrawlerSettings()
        self.waiter = waiter or FixedDelayWait(sleep_ms=driver.pause)
        self.ops_logger = ops_logger

    def _settle(self, ms: int) -> None:
        try:
            self.waiter.wait(ms)
        except Exception as e:
            print(f"  ⚠️  Wait interrupted: {e}")

    def _feed_present(self) -> bool:
        try:
            return bool(self.driver.evaluate(FEED_PRESENT_JS, self.settings.selectors.feed))
        except Exception as e:
            print(f"  ⚠️  Could not check for results feed: {e}")
            return False

    def search(self, query: SearchQuery) -> SearchResult:
        s = self.settings
        url = build_search_url(query, s.navigation.base_url)
        result = SearchResult(query=query, url=url)
        durations: Dict[str, float] = {}
        t0 = time.perf_counter()

        def _mark(stage: str, since: float) -> float:
            now = time.perf_counter()
            durations[stage] = round(now - since, 4)
            return now

        print(f"🔍 Searching for: {query.category} in {query.postal_code}")
        result.status_code = self.driver.navigate(
            url, timeout_ms=s.navigation.timeout_ms, wait_until=s.navigation.wait_until
        )
        self._settle(s.delays.page_load)
        t = _mark("navigate_s", t0)

        self._settle(s.delays.consent_wait)
        result.consent_accepted = ConsentResolver(self.driver, s.labels).resolve()
        if result.consent_accepted:
            self._settle(s.delays.after_consent)
        self._settle(s.delays.results_load)
        t = _mark("consent_s", t)

        result.feed_found = self._feed_present()
        if not result.feed_found:
            print("ℹ️  No results found")
        else:
            result.scroll = ScrollConvergenceEngine(
                self.driver,
                selector=s.scroll.selector,
                max_attempts=s.scroll.max_attempts,
                settle_ms=s.delays.scroll_wait,
                waiter=self.waiter,
            ).run()
            t = _mark("scroll_s", t)

            candidates = ListingExtractor(
                self.driver,
                selectors=s.selectors,
                labels=s.labels,
                base_url=url,
            ).extract()
            result.listed = len(candidates)
            t = _mark("listing_s", t)

            result.enrich = DetailEnricher(
                self.driver,
                settle_ms=s.delays.detail_click,
                selectors=s.selectors,
                labels=s.labels,
                waiter=self.waiter,
            ).enrich(candidates)
            t = _mark("detail_s", t)

            result.businesses = dedupe_candidates(candidates)

        durations["total_s"] = round(time.perf_counter() - t0, 4)
        print(f"✅ Found {len(result.businesses)} unique businesses")
        result.ops_record = self._ops_record(result, durations)
        self._emit_ops(result.ops_record)
        return result

    def _ops_record(self, result: SearchResult, durations: Dict[str, float]) -> Dict[str, Any]:
        scroll = result.scroll
        enrich = result.enrich
        return {
            "mbc_ops": 1,
            "query": {"category": result.query.category, "postal_code": result.query.postal_code},
            "url": result.url,
            "status_code": result.status_code,
            "consent_accepted": result.consent_accepted,
            "feed_found": result.feed_found,
            "scroll": {
                "scrolls": scroll.scrolls if scroll else 0,
                "converged": scroll.converged if scroll else False,
                "extent": scroll.extent if scroll else None,
                "error": scroll.error if scroll else None,
            },
            "counts": {
                "listed": result.listed,
                "enriched": enrich.enriched if enrich else 0,
                "phones": enrich.phones if enrich else 0,
                "detail_failures": enrich.failures if enrich else 0,
                "unique": len(result.businesses),
            },
            "durations": durations,
        }

    def _emit_ops(self, record: Dict[str, Any]) -> None:
        if self.ops_logger is not None:
            self.ops_logger.emit(record)
        if os.environ.get("MBC_OPS_JSON", "0") == "1":
            print(json.dumps(record, ensure_ascii=False))
