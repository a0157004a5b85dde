"""Infrastructure Layer — database sessions, state persistence, logging.

Invariants:
    - Only the shell (services/, api/) imports from here; core/ never does
"""
