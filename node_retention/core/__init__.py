"""Core Layer — pure retention logic, no IO, no async, no logging.

Invariants:
    - No module in core/ imports from services/, schemas/, or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: decision rules testable
      with plain values, no node doubles required
"""
