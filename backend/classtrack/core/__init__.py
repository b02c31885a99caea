"""Core Layer — pure OCC logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure; the only non-determinism is the injectable clock

Design Decisions:
    - Functional core separated from imperative shell: validation, sanitization and
      conflict rendering never wait on the store
"""
