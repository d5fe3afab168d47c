"""Integration tests for the query retry pipeline.

This package contains integration tests that assemble complete pipelines
(retry stage, inner middleware and the HTTP terminal handler) and exercise
them against a mocked backend.

Test Structure:
- test_retry_logic.py: Retry behaviour, logging and metrics end to end
"""
