"""
Test support utilities for stmtkit tests.

Helpers that are not pytest fixtures but are shared across test files.
"""
