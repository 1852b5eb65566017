"""
Test suite for the IPO lottery engine

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/integration/   : Concurrency and end-to-end draw scenarios
"""
