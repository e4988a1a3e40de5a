"""
Test Suite for Monzo to Splitwise

Test Structure:
- fixtures/: Shared test data and fake clients
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI and full reconciliation workflow tests

All test data uses synthetic financial information.
"""
