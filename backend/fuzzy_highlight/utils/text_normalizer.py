"""Deterministic query normalization for pattern building."""

import re
import unicodedata
from typing import List


WHITESPACE_RUN = re.compile(r"\s+")


class TextNormalizer:
    """
    Deterministic normalizer for search queries.
    
    Queries are reduced to a canonical form before a tolerant pattern is
    built from them, so compatibility characters (ligatures, full-width
    forms, non-breaking spaces) compare equal to their plain equivalents.
    """
    
    @staticmethod
    def normalize_query(text: str) -> str:
        """
        Normalize a query for tokenization.
        
        Transformations:
        1. Unicode compatibility composition (NFKC)
        2. Strip leading/trailing whitespace
        
        Args:
            text: Raw query text
            
        Returns:
            Normalized query, possibly empty
        """
        if not text:
            return ""
        
        return unicodedata.normalize("NFKC", text).strip()
    
    @staticmethod
    def tokenize(text: str) -> List[str]:
        """
        Split normalized text on whitespace runs, dropping empty tokens.
        
        Args:
            text: Normalized query text
            
        Returns:
            Ordered list of tokens
        """
        return [token for token in WHITESPACE_RUN.split(text) if token]


# Singleton instance
normalizer = TextNormalizer()
