"""Reflect API Mirror Package: typed request/response contract layer for the Reflect stablecoin API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
