"""Tests for the match engine."""

import logging
import time

import pytest

from fuzzy_highlight.core.schemas import SearchMode, SearchOptions
from fuzzy_highlight.pipeline.interfaces import InvalidQueryError, PatternCompilationError
from fuzzy_highlight.pipeline.match_engine import (
    compile_search_pattern,
    find_match,
    find_all_matches
)


class TestCompileSearchPattern:
    """Test compile_search_pattern function."""
    
    def test_case_insensitive_flag(self):
        """Test case sensitivity follows the options."""
        insensitive = compile_search_pattern("hello", SearchOptions())
        sensitive = compile_search_pattern("hello", SearchOptions(case_insensitive=False))
        
        assert insensitive.search("HELLO") is not None
        assert sensitive.search("HELLO") is None
    
    def test_invalid_query_raises(self):
        """Test the compiler's error propagates from this helper."""
        with pytest.raises(InvalidQueryError):
            compile_search_pattern("", SearchOptions())
    
    def test_regex_error_wrapped(self, monkeypatch):
        """Test regex engine errors become PatternCompilationError."""
        monkeypatch.setattr(
            "fuzzy_highlight.pipeline.match_engine.build_flexible_pattern",
            lambda query, options: "("
        )
        
        with pytest.raises(PatternCompilationError) as exc_info:
            compile_search_pattern("anything", SearchOptions())
        assert exc_info.value.detail == "("


class TestFindMatch:
    """Test find_match function."""
    
    def test_finds_basic_match(self):
        """Test leftmost match offsets and text."""
        match = find_match("Hello World", "hello", SearchOptions(mode=SearchMode.INTRA_WORD))
        
        assert match is not None
        assert match.matched_text == "Hello"
        assert match.start == 0
        assert match.end == 5
        assert match.pattern == "\\bh.?e.?l.?l.?o\\b"
    
    def test_returns_none_for_no_match(self):
        """Test an absent query."""
        assert find_match("Hello World", "xyz") is None
    
    def test_handles_cross_line_text(self):
        """Test a match spanning a line break."""
        match = find_match("total\nassets", "total assets")
        
        assert match is not None
        assert match.matched_text == "total\nassets"
    
    def test_returns_leftmost_match(self):
        """Test the first of several occurrences is returned."""
        match = find_match("apple banana apple", "apple")
        
        assert match.start == 0
    
    def test_case_sensitive_search(self):
        """Test case_insensitive=False."""
        options = SearchOptions(case_insensitive=False)
        
        assert find_match("Hello World", "hello", options) is None
        assert find_match("Hello World", "Hello", options).start == 0
    
    def test_whole_word_option_is_applied(self):
        """Test whole_word=False allows matches inside words."""
        assert find_match("concatenate", "cat") is None
        
        match = find_match("concatenate", "cat", SearchOptions(whole_word=False))
        assert (match.start, match.end) == (3, 6)
    
    def test_full_mode(self):
        """Test full mode bridges punctuation between words."""
        match = find_match("total-assets", "total assets", SearchOptions(mode=SearchMode.FULL))
        
        assert match is not None
        assert match.matched_text == "total-assets"
    
    def test_match_invariants(self):
        """Test end - start == len(matched_text) and the slice agrees."""
        text = "Net total\r\n a\u200bssets were reported"
        match = find_match(text, "total assets")
        
        assert match is not None
        assert match.end - match.start == len(match.matched_text)
        assert text[match.start:match.end] == match.matched_text
    
    @pytest.mark.parametrize("query", ["", "   ", None, 123])
    def test_invalid_query_returns_none(self, query, caplog):
        """Test invalid queries degrade to no match and are logged."""
        with caplog.at_level(logging.ERROR):
            assert find_match("Hello World", query) is None
        
        assert "Regex error" in caplog.text
    
    def test_query_over_length_limit_returns_none(self):
        """Test over-long queries degrade to no match."""
        options = SearchOptions(max_query_length=3)
        
        assert find_match("apple", "apple", options) is None
        assert find_match("app", "app", options) is not None
    
    def test_compilation_failure_returns_none(self, monkeypatch):
        """Test regex engine errors degrade to no match."""
        monkeypatch.setattr(
            "fuzzy_highlight.pipeline.match_engine.build_flexible_pattern",
            lambda query, options: "[unclosed"
        )
        
        assert find_match("Hello World", "hello") is None


class TestFindAllMatches:
    """Test find_all_matches function."""
    
    def test_finds_multiple_matches(self):
        """Test "apple banana apple" yields starts 0 and 13."""
        matches = find_all_matches(
            "apple banana apple", "apple", SearchOptions(mode=SearchMode.INTRA_WORD)
        )
        
        assert len(matches) == 2
        assert matches[0].start == 0
        assert matches[1].start == 13
        assert all(m.matched_text == "apple" for m in matches)
    
    def test_returns_empty_list_for_no_matches(self):
        """Test no occurrences gives an empty list."""
        assert find_all_matches("hello world", "xyz") == []
    
    def test_invalid_query_returns_empty_list(self):
        """Test invalid queries degrade to an empty list."""
        assert find_all_matches("hello world", "") == []
        assert find_all_matches("hello world", None) == []
    
    def test_matches_ordered_and_non_overlapping(self):
        """Test ascending, non-overlapping results."""
        matches = find_all_matches("aaa aaa aaa", "aaa")
        
        assert [m.start for m in matches] == [0, 4, 8]
        for previous, current in zip(matches, matches[1:]):
            assert current.start >= previous.end
    
    def test_multi_word_matches_across_lines(self):
        """Test all matches of a multi-word query with varied whitespace."""
        text = "Total assets\nrose. total\r\nassets fell. TOTAL   ASSETS"
        matches = find_all_matches(text, "total assets")
        
        assert len(matches) == 3
        assert matches[1].matched_text == "total\r\nassets"
    
    def test_zero_length_matches_terminate(self, monkeypatch):
        """Test the scan advances past zero-length matches."""
        monkeypatch.setattr(
            "fuzzy_highlight.pipeline.match_engine.build_flexible_pattern",
            lambda query, options: "x*"
        )
        
        matches = find_all_matches("axxb", "x")
        
        assert [(m.start, m.end) for m in matches] == [(0, 0), (1, 3), (3, 3), (4, 4)]
        starts = [m.start for m in matches]
        assert starts == sorted(starts)
    
    def test_empty_text(self):
        """Test searching empty text."""
        assert find_all_matches("", "apple") == []


class TestFullModeBacktracking:
    """Test full mode stays fast on repetitive text that never matches."""
    
    ADVERSARIAL_TEXT = "a" * 40 + "_"
    
    def test_query_at_limit_finishes_quickly(self):
        """Test the longest accepted full mode query on adversarial text."""
        query = " ".join(["a"] * 10)
        options = SearchOptions(mode=SearchMode.FULL)
        assert len(query) <= options.max_full_mode_length
        
        started = time.perf_counter()
        assert find_match(self.ADVERSARIAL_TEXT, query, options) is None
        assert find_all_matches(self.ADVERSARIAL_TEXT, query, options) == []
        elapsed = time.perf_counter() - started
        
        assert elapsed < 2.0
    
    def test_longer_query_rejected_without_scanning(self):
        """Test a query over the limit returns no match at once."""
        query = " ".join(["a"] * 15)
        
        started = time.perf_counter()
        assert find_match(self.ADVERSARIAL_TEXT, query, SearchOptions(mode=SearchMode.FULL)) is None
        elapsed = time.perf_counter() - started
        
        assert elapsed < 1.0
