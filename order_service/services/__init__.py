"""Services Layer — orchestration of core logic around store and catalog IO.

Invariants:
    - Collaborators are passed to constructors explicitly (no container, no decorators)
"""
