"""Intent and entity extraction."""

from .extractor import IntentExtractor, flatten_input
from .matcher import PatternMatcher, KeywordMatcher, SportDetector, default_matcher

__all__ = ["IntentExtractor", "flatten_input", "PatternMatcher", "KeywordMatcher", "SportDetector", "default_matcher"]
