"""Service Layer — imperative shell around the pure core.

Invariants:
    - Services own IO ordering (load, save); business rules live in core/
"""
