"""Unit tests for the processor protocol client and the HTTP processor."""
