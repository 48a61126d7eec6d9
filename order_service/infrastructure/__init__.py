"""Infrastructure Layer — database, catalog HTTP client, logging.

Invariants:
    - All external failures mapped to core/errors.py types before leaving this layer
"""
