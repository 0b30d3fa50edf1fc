"""Core Layer — pure scheduling logic, no IO, no async, no logging.

Invariants:
    - No module in core/ imports from services/, schemas/, infrastructure/, or config
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
