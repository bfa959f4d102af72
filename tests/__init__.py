"""
Test suite for the lens pricing engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
