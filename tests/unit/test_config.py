from pathlib import Path

import pytest
from pydantic import ValidationError

from mapscrawl.config import CrawlerSettings


def test_defaults_match_documented_values():
    s = CrawlerSettings()
    assert s.navigation.timeout_ms == 60000
    assert s.navigation.wait_until == "networkidle"
    assert s.delays.page_load == 2000
    assert s.delays.after_consent == 3000
    assert s.delays.results_load == 4000
    assert s.scroll.max_attempts == 10
    assert s.selectors.articles == 'div[role="article"]'
    assert "alle akzeptieren" in s.labels.consent_phrases
    assert s.output.indent == 2
    assert s.browser.headless is False


def test_from_yaml_partial_override(tmp_path: Path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(
        "delays:\n  scroll_wait: 500\nscroll:\n  max_attempts: 3\nlabels:\n  phone_markers: ['Tel.:']\n",
        encoding="utf-8",
    )
    s = CrawlerSettings.from_yaml(cfg)
    assert s.delays.scroll_wait == 500
    assert s.delays.detail_click == 2000  # untouched default
    assert s.scroll.max_attempts == 3
    assert s.labels.phone_markers == ["Tel.:"]


def test_from_yaml_empty_file_gives_defaults(tmp_path: Path):
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("", encoding="utf-8")
    assert CrawlerSettings.from_yaml(cfg) == CrawlerSettings()


def test_from_yaml_rejects_non_mapping(tmp_path: Path):
    cfg = tmp_path / "list.yaml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        CrawlerSettings.from_yaml(cfg)


def test_from_yaml_rejects_negative_delay(tmp_path: Path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("delays:\n  page_load: -1\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        CrawlerSettings.from_yaml(cfg)


def test_with_overrides_ignores_none():
    s = CrawlerSettings().with_overrides({
        "browser": {"headless": True},
        "scroll": {"max_attempts": None},
    })
    assert s.browser.headless is True
    assert s.scroll.max_attempts == 10


def test_with_overrides_unknown_section():
    with pytest.raises(KeyError):
        CrawlerSettings().with_overrides({"nope": {"x": 1}})


def test_example_config_loads():
    root = Path(__file__).resolve().parents[2]
    s = CrawlerSettings.from_yaml(root / "config" / "example.yaml")
    assert s == CrawlerSettings()
