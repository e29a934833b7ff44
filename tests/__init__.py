"""
Test Suite for the Fund Returns Analytics Engine

Includes:
- Unit tests for sanitizers, normalizers and calculations
- Loader tests with mocked network calls
- Integration tests for the analysis job and report rendering
"""
