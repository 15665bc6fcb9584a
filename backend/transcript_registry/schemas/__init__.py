"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate SHAPE at the system boundary (types, hex format, required fields)
    - Domain rules (GPA range, lengths, hash length) stay in core/ so error codes match

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
