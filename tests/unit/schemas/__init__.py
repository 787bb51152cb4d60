"""Unit tests for citation and processor protocol schemas."""
