"""Pydantic Schemas: request/response contracts for every mirrored route.

Invariants:
    - Schemas validate at the system boundary (request input, handler output)
    - Domain enums and identifier patterns come from core/domain_types.py

Design Decisions:
    - One module per route group; common.py holds the shared field types
"""
