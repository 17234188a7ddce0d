"""Core Layer: pure domain logic, no IO, no clock, no framework.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Functions are pure and deterministic; the store protocols only declare async seams

Design Decisions:
    - Functional core separated from imperative shell
"""
