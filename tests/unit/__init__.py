"""
Unit tests for healthlog components.

Unit tests should be fast, deterministic, and test single units of
functionality; AWS services are mocked with moto or unittest.mock.
"""
