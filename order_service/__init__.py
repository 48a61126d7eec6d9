"""Order Service Package — ordering core behind a thin HTTP edge.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
