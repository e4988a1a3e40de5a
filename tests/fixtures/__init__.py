"""
Test Fixtures and Utilities

Shared test data and in-memory collaborators.

This module provides:
- Synthetic Monzo and Splitwise payloads
- Fake API clients for reconciliation tests

All test data is synthetic and does not contain real financial information.
"""
