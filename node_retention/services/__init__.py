"""Services Layer — evaluation guard, retention strategy, node collaborator contract.

Invariants:
    - Services gather facts and apply side effects; decisions come from core/
    - Every termination goes through RetentionStrategy (single call site)
"""
