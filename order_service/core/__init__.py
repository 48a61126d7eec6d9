"""Core Layer — pure ordering logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Builder, state machine and order-number generation are deterministic given their inputs

Design Decisions:
    - Functional core separated from imperative shell: services/ wraps the IO around it
"""
