"""Services Layer — assignment orchestrator and side-effect dispatch.

Invariants:
    - Services own transaction boundaries; core never touches the DB
    - Side effects are submitted only after the core transaction commits

Design Decisions:
    - Explicit dict mapping side-effect kind -> handler (no auto-discovery)
"""
