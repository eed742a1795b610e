"""Core Layer: pure order logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from infrastructure/, schemas/ or api/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from the file-backed shell: the store only
      reads, writes and delegates every decision to these functions
"""
