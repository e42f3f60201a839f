"""Core Layer — the codec itself: pure structural transforms, no IO, no async.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or schemas/
    - serialize/merge/read_into are synchronous and touch only the values passed in

Design Decisions:
    - Functional core separated from the FastAPI shell: the shell resolves the
      principal and moves bytes, the core decides which fields cross the boundary
"""
