"""OrderDesk Application Package: order CRUD over a CSV-backed record store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
