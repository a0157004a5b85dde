"""relhub — personal CRM: contacts, interactions, follow-up tasks, pipeline metrics.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
