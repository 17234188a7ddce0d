"""Infrastructure Layer: data sources, the integration registry, and cross-cutting concerns.

Invariants:
    - Implementations satisfy core.repository_protocols; handlers never import them directly
    - Lifecycle (create/close) is owned by AppServices and the app lifespan

Design Decisions:
    - Static and in-memory implementations stand where live RPC and a database would go
"""
