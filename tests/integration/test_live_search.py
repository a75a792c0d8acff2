import os
from pathlib import Path

import pytest

from mapscrawl.config import CrawlerSettings
from mapscrawl.pipeline.drivers import BrowserSession
from mapscrawl.pipeline.search import MapsSearchPipeline
from mapscrawl.schemas import SearchQuery

skip_live = pytest.mark.skipif(
    os.getenv("MBC_RUN_PW_TESTS", "0") != "1",
    reason="Set MBC_RUN_PW_TESTS=1 to run the live Google Maps search"
)


@skip_live
def test_live_search_smoke(tmp_path: Path):
    # Hits the real service; results vary, so only invariants are checked.
    settings = CrawlerSettings().with_overrides({
        "browser": {"headless": True},
        "scroll": {"max_attempts": 2},
    })
    with BrowserSession(settings.browser) as driver:
        result = MapsSearchPipeline(driver, settings).search(
            SearchQuery(category="apotheke", postal_code="44388")
        )
    names = [c.name for c in result.businesses]
    assert all(n.strip() for n in names)
    keys = {(c.name.lower(), (c.address or "").lower()) for c in result.businesses}
    assert len(keys) == len(result.businesses)
