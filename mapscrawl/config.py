"""
Crawler settings.

Every timing, selector and label the pipeline depends on lives here so it
can be overridden from a YAML file (see ``config/example.yaml``) or from
the CLI without touching pipeline code. Delays are milliseconds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class BrowserSettings(BaseModel):
    headless: bool = False  # visible mode gets fewer interstitials
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "de-DE"
    launch_args: List[str] = Field(default_factory=lambda: [
        "--start-maximized",
        "--disable-dev-shm-usage",
        "--no-first-run",
        "--disable-default-apps",
    ])


class NavigationSettings(BaseModel):
    base_url: str = "https://www.google.com/maps/search"
    timeout_ms: int = Field(default=60000, gt=0)
    wait_until: str = "networkidle"


class DelaySettings(BaseModel):
    page_load: int = Field(default=2000, ge=0)
    consent_wait: int = Field(default=2000, ge=0)
    after_consent: int = Field(default=3000, ge=0)
    results_load: int = Field(default=4000, ge=0)
    scroll_wait: int = Field(default=2000, ge=0)
    detail_click: int = Field(default=2000, ge=0)


class ScrollSettings(BaseModel):
    max_attempts: int = Field(default=10, ge=0)
    selector: str = '[role="feed"]'


class SelectorSettings(BaseModel):
    feed: str = '[role="feed"]'
    articles: str = 'div[role="article"]'
    business_link: str = 'a.hfpxzc'
    address_elements: str = 'div[class*="fontBodyMedium"]'
    phone_button: str = 'button[data-item-id^="phone"]'
    phone_labelled: str = 'button[aria-label]'
    address_button: str = 'button[data-item-id="address"]'


class LabelSettings(BaseModel):
    consent_phrases: List[str] = Field(default_factory=lambda: [
        "accept all",
        "alle akzeptieren",
        "alles akzeptieren",
        "ich stimme zu",
    ])
    address_keywords: List[str] = Field(default_factory=lambda: [
        "Straße", "Str.", "Weg", "Platz",
    ])
    address_prefixes: List[str] = Field(default_factory=lambda: [
        "Address", "Adresse",
    ])
    phone_markers: List[str] = Field(default_factory=lambda: [
        "Phone:", "Telefon:",
    ])


class OutputSettings(BaseModel):
    filename: str = "google_maps_results.json"
    indent: int = Field(default=2, ge=0)
    csv: bool = False


class CrawlerSettings(BaseModel):
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    navigation: NavigationSettings = Field(default_factory=NavigationSettings)
    delays: DelaySettings = Field(default_factory=DelaySettings)
    scroll: ScrollSettings = Field(default_factory=ScrollSettings)
    selectors: SelectorSettings = Field(default_factory=SelectorSettings)
    labels: LabelSettings = Field(default_factory=LabelSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CrawlerSettings":
        """Load settings from YAML; missing sections keep their defaults."""
        with Path(path).open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"config root must be a mapping, got {type(data).__name__}")
        return cls.model_validate(data)

    def with_overrides(self, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> "CrawlerSettings":
        """Return a copy with ``{section: {key: value}}`` overrides applied.

        ``None`` values are ignored so unset CLI flags fall through.
        """
        data = self.model_dump()
        for section, values in (overrides or {}).items():
            if section not in data:
                raise KeyError(f"unknown config section: {section}")
            for key, value in (values or {}).items():
                if value is not None:
                    data[section][key] = value
        return CrawlerSettings.model_validate(data)
