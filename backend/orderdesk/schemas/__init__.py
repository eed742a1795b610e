"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Requests are converted to core types (OrderPatch) before reaching the store
"""
