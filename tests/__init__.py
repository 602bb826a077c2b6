#!/usr/bin/env python3
"""
Test suite for the matching core.

All tests are plain unit tests with no external services:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Fixtures:
    tests/fixtures/gig_fixtures.py builds event, talent and viewer
    documents shaped like the document store's records.
"""
