"""API Layer: route table, dispatcher, and error handlers.

Invariants:
    - Every route is declared once in route_table.ROUTE_TABLE (no auto-discovery)
    - All endpoints return the JSON envelope, except GET / and GET /health

Design Decisions:
    - One generic endpoint per route delegates to services handlers
"""
