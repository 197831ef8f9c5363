"""Shared pytest configuration."""


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: timing-based tests, skipped by run_tests.py unless --all")
