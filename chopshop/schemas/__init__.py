"""Record Schemas — rights-annotated records served by the API.

Invariants:
    - One record type per resource serves every caller; rights decide the view
    - Every field has a default, so an absent wire key decodes to a zero value
"""
