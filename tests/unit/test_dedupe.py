from mapscrawl.pipeline.dedupe import dedupe_candidates, dedupe_key
from mapscrawl.schemas import BusinessCandidate


def make(name, address=None, phone=None):
    return BusinessCandidate(name=name, address=address, phone=phone)


def test_case_insensitive_key_collapses():
    a = make("Cafe X", "Main St 1", phone="1")
    b = make("CAFE X", "main st 1", phone="2")
    out = dedupe_candidates([a, b])
    assert out == [a]
    assert out[0].phone == "1"


def test_missing_addresses_collide_on_name():
    a = make("Praxis")
    b = make("praxis")
    assert dedupe_candidates([a, b]) == [a]
    assert dedupe_key(a) == ("praxis", "")


def test_differently_formatted_addresses_are_kept():
    a = make("Cafe X", "Main St 1")
    b = make("Cafe X", "Main Street 1")
    assert dedupe_candidates([a, b]) == [a, b]


def test_first_seen_order_preserved():
    items = [make("B"), make("A"), make("b"), make("C"), make("a")]
    assert [c.name for c in dedupe_candidates(items)] == ["B", "A", "C"]


def test_idempotent_and_input_untouched():
    items = [make("X", "1"), make("x", "1"), make("Y")]
    once = dedupe_candidates(items)
    twice = dedupe_candidates(once)
    assert once == twice
    assert once is not items
    assert len(items) == 3


def test_empty_input():
    assert dedupe_candidates([]) == []
