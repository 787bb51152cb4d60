"""Unit tests for the document host adapter, node indexing and owned containers."""
