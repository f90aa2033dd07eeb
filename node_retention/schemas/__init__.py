"""Pydantic Schemas — validation of retention fields read from node definitions.

Invariants:
    - Schemas validate at system boundary (host storage), parsing rules live in core/
"""
