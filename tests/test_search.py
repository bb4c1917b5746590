"""Tests for search module."""

import pytest

from src.tailstream.search import (
    binary_search_floor,
    find_value,
    find_first_subsequence,
    find_last_subsequence,
)


class TestBinarySearchFloor:
    """Tests for binary_search_floor function."""

    def test_exact_match(self):
        assert binary_search_floor([1, 3, 5, 7], 5) == 2

    def test_between_elements_returns_floor(self):
        assert binary_search_floor([1, 3, 5, 7], 4) == 1
        assert binary_search_floor([1, 3, 5, 7], 6) == 2

    def test_first_and_last(self):
        assert binary_search_floor([1, 3, 5, 7], 1) == 0
        assert binary_search_floor([1, 3, 5, 7], 7) == 3

    def test_below_first_element(self):
        assert binary_search_floor([1, 3, 5, 7], 0) < 0

    def test_above_last_element(self):
        assert binary_search_floor([1, 3, 5, 7], 100) == 3

    def test_empty(self):
        assert binary_search_floor([], 1) < 0

    def test_duplicates_return_last_equal(self):
        assert binary_search_floor([1, 2, 2, 2, 3], 2) == 3

    def test_strings(self):
        assert binary_search_floor(["apple", "kiwi", "pear"], "melon") == 1

    def test_none_raises(self):
        with pytest.raises(ValueError):
            binary_search_floor(None, 1)


class TestFindValue:
    """Tests for find_value function."""

    def test_found(self):
        assert find_value([10, 20, 30], 25) == 1

    def test_not_found(self):
        assert find_value([10, 20, 30], 5) is None
        assert find_value([], 5) is None


class TestFindFirstSubsequence:
    """Tests for find_first_subsequence function."""

    def test_finds_first_occurrence(self):
        assert find_first_subsequence(b"ab\ncd\nef", b"\n") == 2

    def test_respects_offset(self):
        assert find_first_subsequence(b"ab\ncd\nef", b"\n", 3) == 5

    def test_offset_at_match(self):
        assert find_first_subsequence(b"ab\ncd\nef", b"\n", 2) == 2

    def test_multi_byte_pattern(self):
        assert find_first_subsequence(b"a\r\nb\r\n", b"\r\n") == 1

    def test_not_found(self):
        assert find_first_subsequence(b"abcdef", b"xyz") == -1

    def test_match_at_start_and_end(self):
        assert find_first_subsequence(b"xyabc", b"xy") == 0
        assert find_first_subsequence(b"abcxy", b"xy") == 3

    def test_partial_match_at_end(self):
        assert find_first_subsequence(b"abcx", b"xy") == -1

    def test_empty_inputs(self):
        assert find_first_subsequence(b"", b"a") == -1
        assert find_first_subsequence(b"abc", b"") == -1
        assert find_first_subsequence(None, b"a") == -1
        assert find_first_subsequence(b"abc", None) == -1

    def test_pattern_longer_than_buffer(self):
        assert find_first_subsequence(b"ab", b"abc") == -1

    def test_offset_past_end(self):
        assert find_first_subsequence(b"abc", b"c", 4) == -1

    def test_offset_at_end(self):
        assert find_first_subsequence(b"abc", b"c", 3) == -1

    def test_negative_offset_raises(self):
        with pytest.raises(ValueError):
            find_first_subsequence(b"abc", b"a", -1)

    def test_generic_sequences(self):
        assert find_first_subsequence([1, 2, 3, 2, 3], [2, 3]) == 1
        assert find_first_subsequence([1, 2, 3, 2, 3], [2, 3], 2) == 3
        assert find_first_subsequence((1, 2, 3), (4,)) == -1

    def test_bytearray(self):
        assert find_first_subsequence(bytearray(b"ab\n"), b"\n") == 2

    def test_bytes_and_generic_paths_agree(self):
        buffer = b"one\ntwo\r\nthree\n\nfour"
        for pattern in (b"\n", b"\r\n", b"o", b"four", b"zz"):
            for offset in range(len(buffer) + 1):
                assert find_first_subsequence(buffer, pattern, offset) == find_first_subsequence(
                    list(buffer), list(pattern), offset
                )


class TestFindLastSubsequence:
    """Tests for find_last_subsequence function."""

    def test_finds_last_occurrence(self):
        assert find_last_subsequence(b"ab\ncd\nef", b"\n") == 5

    def test_respects_offset(self):
        assert find_last_subsequence(b"ab\ncd\nef", b"\n", 4) == 2

    def test_offset_at_match(self):
        assert find_last_subsequence(b"ab\ncd\nef", b"\n", 5) == 5

    def test_not_found(self):
        assert find_last_subsequence(b"abcdef", b"xyz") == -1

    def test_match_at_start(self):
        assert find_last_subsequence(b"xyabc", b"xy", 3) == 0

    def test_empty_inputs(self):
        assert find_last_subsequence(b"", b"a") == -1
        assert find_last_subsequence(b"abc", b"") == -1

    def test_offset_past_end(self):
        assert find_last_subsequence(b"abc", b"c", 4) == -1

    def test_negative_offset_raises(self):
        with pytest.raises(ValueError):
            find_last_subsequence(b"abc", b"a", -1)

    def test_generic_sequences(self):
        assert find_last_subsequence([1, 2, 3, 2, 3], [2, 3]) == 3
        assert find_last_subsequence([1, 2, 3, 2, 3], [2, 3], 2) == 1

    def test_single_occurrence_agrees_with_first(self):
        buffer = b"the quick brown fox"
        for pattern in (b"quick", b"t", b"fox", b" b"):
            assert find_first_subsequence(buffer, pattern, 0) == find_last_subsequence(buffer, pattern)

    def test_bytes_and_generic_paths_agree(self):
        buffer = b"one\ntwo\r\nthree\n\nfour"
        for pattern in (b"\n", b"\r\n", b"o", b"one", b"zz"):
            for offset in range(len(buffer) + 1):
                assert find_last_subsequence(buffer, pattern, offset) == find_last_subsequence(
                    list(buffer), list(pattern), offset
                )
