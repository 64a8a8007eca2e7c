"""
Test Suite for Insight Hunter

Test Structure:
- fixtures/: Shared test data and utilities
- unit/: Unit tests mirroring src/ package structure
- integration/: End-to-end workflow tests

Test Data:
All test data uses synthetic ledgers. Real tenant data is never included in tests.
"""
