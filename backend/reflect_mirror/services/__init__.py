"""Services Layer: route handlers grouped by resource.

Invariants:
    - Handlers are async (request_model, RouteContext) -> response model(s)
    - Handlers raise ReflectMirrorError subclasses, never build error responses

Design Decisions:
    - One handler file per resource group for locality
"""
