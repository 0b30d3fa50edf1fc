"""Infrastructure Layer — cross-cutting concerns for the shell.

Invariants:
    - Infrastructure never imports from core/ scheduling logic

Design Decisions:
    - Kept separate from services/: logging setup is process-wide, not per-tick
"""
