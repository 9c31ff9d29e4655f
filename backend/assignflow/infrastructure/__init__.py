"""Infrastructure Layer — persistence, port adapters, and cross-cutting concerns.

Invariants:
    - Adapters implement the Protocols in core/repository_protocols.py
    - All SQLAlchemy failures are mapped to DatabaseError before leaving this layer

Design Decisions:
    - One file per port for locality: chat rooms, call masking, location, notifications
"""
