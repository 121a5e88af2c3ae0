"""Test suite for depcache.

Test Structure:
- unit/: Unit tests for individual components
  - caching/: Keys, memory tier, file tier, tiered facade, cached_call
  - io/: Fake and real filesystem implementations
  - config/: Config models and loader
  - utils/: Logging configuration
- integration/: Tiered cache against the real filesystem
- conftest.py: Shared fixtures (fake filesystem, manual clock)
"""
