"""
Core utilities shared across the CRM package.

This package hosts:
- configuration helpers (env vars, storage paths, feature flags)
- the clock/id provider injected into repositories
- logging setup for the HTTP app and scripts

Repositories and services depend on these primitives instead of reading
os.environ or the wall clock directly.
"""
