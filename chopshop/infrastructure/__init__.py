"""Infrastructure Layer — session token signing and logging setup.

Invariants:
    - Nothing here decides field visibility; that stays in core/
"""
