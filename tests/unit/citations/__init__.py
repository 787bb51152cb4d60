"""Test package for citations.

Contains unit tests for:
- Document reconciliation (spoof)
- Citation and bibliography rendering
- Demo peg persistence
- CitationSession
"""
