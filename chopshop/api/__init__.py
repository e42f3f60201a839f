"""API Layer — FastAPI request context, guards, routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every record leaving a route goes through RequestContext.json_response
    - Every record body entering a route goes through RequestContext.read_json

Design Decisions:
    - Thin routes delegate field filtering to core/ (codec) and principal
      resolution to infrastructure/ (session token)
"""
