"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never filter fields by hand: the codec does it from record policy

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
