"""Infrastructure Layer: filesystem persistence and cross-cutting concerns.

Invariants:
    - Infrastructure holds all file IO; core/ never touches the filesystem
    - Filesystem errors surface as OSError, never silently retried
"""
