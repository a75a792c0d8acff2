from mapscrawl.config import LabelSettings
from mapscrawl.pipeline.detail import (
    COLLECT_OUTER_HTML_JS,
    DetailEnricher,
    normalize_phone,
    parse_detail_html,
    phone_from_label,
    strip_address_label,
)
from mapscrawl.schemas import BusinessCandidate


LABELS = LabelSettings()


def pane(phone_id=None, labelled=None, address_label=None):
    """Build the three HTML fragments the in-page collector returns."""
    phone_html = f'<button data-item-id="{phone_id}"></button>' if phone_id else ""
    labelled_html = "".join(f'<button aria-label="{lbl}"></button>' for lbl in (labelled or []))
    address_html = f'<button data-item-id="address" aria-label="{address_label}"></button>' if address_label else ""
    return [phone_html, labelled_html, address_html]


class StubItem:
    def __init__(self, index):
        self.index = index


class StubPane:
    """Driver stub: item ``i`` opens detail pane ``panes[i]``."""

    def __init__(self, panes, rendered=None, broken=()):
        self.panes = panes
        self.rendered = len(panes) if rendered is None else rendered
        self.broken = set(broken)
        self.clicked = []
        self.article_queries = 0

    def find_elements(self, selector, within=None):
        if within is None:
            assert selector == 'div[role="article"]'
            self.article_queries += 1
            return [StubItem(i) for i in range(self.rendered)]
        assert selector == "a.hfpxzc"
        return [("link", within.index)]

    def click_element(self, element):
        _, index = element
        if index in self.broken:
            raise RuntimeError("Element is not attached to the DOM")
        self.clicked.append(index)

    def evaluate(self, script, arg=None):
        assert script == COLLECT_OUTER_HTML_JS
        assert arg == ['button[data-item-id^="phone"]', "button[aria-label]", 'button[data-item-id="address"]']
        return self.panes[self.clicked[-1]]


class NoWait:
    def __init__(self):
        self.calls = []

    def wait(self, timeout_ms, condition=None):
        self.calls.append(timeout_ms)
        return True


def enricher(driver, waiter=None):
    return DetailEnricher(driver, settle_ms=2000, labels=LABELS, waiter=waiter or NoWait())


def test_normalize_phone_strips_scheme():
    assert normalize_phone("phone:tel:+492311234567") == "+492311234567"
    assert normalize_phone("phone: 0231 123") == "0231 123"
    assert normalize_phone("tel:0231") == "0231"
    assert normalize_phone("phone:tel:") is None
    assert normalize_phone(None) is None


def test_phone_from_label_marker_variants():
    assert phone_from_label("Phone: 0231 1234567 ", LABELS.phone_markers) == "0231 1234567"
    assert phone_from_label("Telefon: 030 999", LABELS.phone_markers) == "030 999"
    assert phone_from_label("Website: example.com", LABELS.phone_markers) is None
    assert phone_from_label("Phone:", LABELS.phone_markers) is None


def test_strip_address_label_locales():
    assert strip_address_label("Address: Main St 1", LABELS.address_prefixes) == "Main St 1"
    assert strip_address_label("Adresse: Hauptstraße 5, 44388 Dortmund", LABELS.address_prefixes) == "Hauptstraße 5, 44388 Dortmund"
    assert strip_address_label("adresse:Lindenweg 3", LABELS.address_prefixes) == "Lindenweg 3"
    assert strip_address_label("Lindenweg 3", LABELS.address_prefixes) == "Lindenweg 3"
    assert strip_address_label("Adresse: ", LABELS.address_prefixes) is None


def test_parse_prefers_structured_phone():
    reading = parse_detail_html(*pane(
        phone_id="phone:tel:+49231111",
        labelled=["Phone: 0231 222"],
        address_label="Adresse: Hauptstraße 5",
    ), labels=LABELS)
    assert reading.phone == "+49231111"
    assert reading.address == "Hauptstraße 5"


def test_parse_falls_back_to_first_labelled_phone():
    reading = parse_detail_html(*pane(
        labelled=["Website: example.com", "Phone: 0231 222", "Phone: 0231 333"],
    ), labels=LABELS)
    assert reading.phone == "0231 222"
    assert reading.address is None


def test_parse_empty_pane():
    reading = parse_detail_html("", "", "", labels=LABELS)
    assert reading.phone is None
    assert reading.address is None


def test_detail_address_overwrites_list_address():
    candidates = [
        BusinessCandidate(name="Short", address="Short St"),
        BusinessCandidate(name="Keep", address="Short St"),
    ]
    driver = StubPane([
        pane(phone_id="phone:tel:0231 1", address_label="Address: Short Street 12, 12345 City"),
        pane(),
    ])
    waiter = NoWait()
    stats = enricher(driver, waiter).enrich(candidates)

    assert candidates[0].address == "Short Street 12, 12345 City"
    assert candidates[0].phone == "0231 1"
    assert candidates[1].address == "Short St"
    assert candidates[1].phone is None
    assert stats.attempted == 2
    assert stats.enriched == 1
    assert stats.phones == 1
    assert stats.failures == 0
    assert waiter.calls == [2000, 2000]
    # list items are re-queried for every candidate
    assert driver.article_queries == 2


def test_one_failure_does_not_abort_batch(capsys):
    candidates = [BusinessCandidate(name="Broken"), BusinessCandidate(name="Fine")]
    driver = StubPane([pane(), pane(phone_id="phone:tel:030 5")], broken={0})
    stats = enricher(driver).enrich(candidates)
    assert candidates[0].phone is None
    assert candidates[1].phone == "030 5"
    assert stats.failures == 1
    assert "Could not extract details for Broken" in capsys.readouterr().out


def test_item_no_longer_rendered_is_skipped():
    candidates = [BusinessCandidate(name="A"), BusinessCandidate(name="B", address="Weg 1")]
    driver = StubPane([pane(phone_id="phone:tel:1"), pane()], rendered=1)
    stats = enricher(driver).enrich(candidates)
    assert candidates[0].phone == "1"
    assert candidates[1].address == "Weg 1"
    assert stats.failures == 1
    assert driver.clicked == [0]
