"""API Schemas — Pydantic request/response models.

Invariants:
    - Response models never declare a phone field for the booking owner
    - Request models validate length limits before reaching the orchestrator
"""
