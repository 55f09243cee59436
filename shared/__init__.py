"""
Shared utilities for the registry submission client.

This package aggregates the cross-cutting building blocks:

- config: Client configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- test_helpers: Document factories and transport doubles for tests

Only test_helpers may import from service_* packages.
"""
