"""Unit tests for citation storage: keys, codec, key-value and document-embedded backends."""
