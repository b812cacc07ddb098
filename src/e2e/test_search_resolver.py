# src/e2e/test_search_resolver.py

import pytest

from backend.DB.index import SuffixArrayIndex
from backend.errors import BadQuery
from backend.search import search, resolve_offsets, extract_snippet


class FakeIndex:
    """
    Minimal index double for the resolver:
      - hits: dict pattern -> offsets returned by lookup()
      - calls: every pattern lookup() was asked for, in order
    """
    def __init__(self, data: bytes, hits: dict[bytes, list[int]] | None = None):
        self._data = data
        self._hits = hits or {}
        self.calls: list[bytes] = []

    def lookup(self, pattern: bytes, limit: int = -1) -> list[int]:
        self.calls.append(pattern)
        return list(self._hits.get(pattern, []))

    def bytes(self) -> memoryview:
        return memoryview(self._data)

    def __len__(self) -> int:
        return len(self._data)


CATS = b"The Cat sat. the cat ran. THE CAT slept."


def test_cat_scenario():
    idx = SuffixArrayIndex.build(CATS)
    rows = search(idx, "cat", half_width=10)
    assert [r.offset for r in rows] == [4, 17, 30]
    assert [r.text for r in rows] == [
        "The Cat sat. t",
        " sat. the cat ran. T",
        " ran. THE CAT slept.",
    ]
    assert all(len(r.text) <= 20 for r in rows)


def test_case_variant_completeness():
    idx = SuffixArrayIndex.build(b"Hello world. HELLO again. hello there.")
    rows = search(idx, "hello", half_width=5)
    assert [r.offset for r in rows] == [0, 13, 26]


def test_results_are_in_ascending_corpus_order():
    data = b"cat CAT Cat cat CAT Cat " * 20
    rows = search(SuffixArrayIndex.build(data), "Cat", half_width=4)
    offs = [r.offset for r in rows]
    assert offs == sorted(offs)
    assert len(offs) == 120


def test_search_is_idempotent():
    idx = SuffixArrayIndex.build(CATS)
    assert search(idx, "the") == search(idx, "the")


def test_each_distinct_variant_is_looked_up_once():
    fake = FakeIndex(b"OK ok Ok")
    search(fake, "OK")
    assert fake.calls == [b"OK", b"ok", b"Ok"]


def test_rejected_query_never_touches_the_index():
    fake = FakeIndex(b"a a a")
    with pytest.raises(BadQuery):
        search(fake, " a ")
    assert fake.calls == []


def test_two_byte_query_without_matches_returns_empty():
    fake = FakeIndex(b"nothing here")
    assert search(fake, "ab") == []
    assert fake.calls == [b"ab", b"AB", b"Ab"]


def test_equal_offsets_from_different_variants_are_collapsed():
    fake = FakeIndex(b"x" * 20, {b"ab": [5, 1], b"AB": [5, 9]})
    assert resolve_offsets(fake, ["ab", "AB"]) == [1, 5, 9]


def test_snippet_clamped_at_start():
    data = b"0123456789abcdefghij"
    s = extract_snippet(memoryview(data), 0, 5)
    assert (s.start, s.end) == (0, 5)
    assert s.text == "01234"


def test_snippet_clamped_at_end():
    data = b"0123456789abcdefghij"
    s = extract_snippet(memoryview(data), 19, 5)
    assert (s.start, s.end) == (14, 20)
    assert s.text == "efghij"


def test_snippet_window_is_two_half_widths_in_the_middle():
    data = b"0123456789abcdefghij"
    s = extract_snippet(data, 10, 3)
    assert s.text == "789abc"


def test_snippet_cut_inside_multibyte_char_does_not_fail():
    data = "ééé cat ééé".encode("utf-8")
    rows = search(SuffixArrayIndex.build(data), "cat", half_width=4)
    assert len(rows) == 1
    assert "cat" in rows[0].text
    assert "�" in rows[0].text


def test_empty_corpus_returns_no_snippets():
    assert search(SuffixArrayIndex.build(b""), "anything") == []
