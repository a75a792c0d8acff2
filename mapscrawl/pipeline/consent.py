from __future__ import annotations

from typing import List

from ..config import LabelSettings
from .drivers.base import PageDriver


# Runs in the page. Phrase match first, then the "second button of the
# first form" layout fallback. Returns true if something was clicked.
ACCEPT_CONSENT_JS = """
(phrases) => {
    const buttons = Array.from(document.querySelectorAll('button'));
    const accept = buttons.find(btn => {
        const text = (btn.textContent || '').toLowerCase();
        return phrases.some(p => text.includes(p));
    });
    if (accept) {
        accept.click();
        return true;
    }
    const form = document.querySelector('form');
    if (form) {
        const formButtons = form.querySelectorAll('button');
        if (formButtons.length >= 2) {
            formButtons[1].click();
            return true;
        }
    }
    return false;
}
"""


class ConsentResolver:
    """Best-effort, one-shot dismissal of the cookie consent overlay.

    The form fallback assumes the affirmative control is the second button
    and may click the wrong one on unfamiliar layouts.
    """

    def __init__(self, driver: PageDriver, labels: LabelSettings | None = None) -> None:
        self.driver = driver
        self.labels = labels or LabelSettings()

    def _phrases(self) -> List[str]:
        return [p.strip().lower() for p in self.labels.consent_phrases if p and p.strip()]

    def resolve(self) -> bool:
        print("🍪 Checking for cookie consent dialog...")
        try:
            clicked = bool(self.driver.evaluate(ACCEPT_CONSENT_JS, self._phrases()))
        except Exception as e:
            print(f"  ⚠️  Consent handling failed: {e}")
            return False
        if clicked:
            print("  ✅ Cookie consent accepted")
        else:
            print("  ℹ️  No cookie consent dialog found or already accepted")
        return clicked
