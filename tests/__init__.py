"""
Test suite for betting_ledger

Contains:
- tests/unit/          : Unit tests for individual modules and protocol scenarios
"""
