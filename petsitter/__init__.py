"""
PetSitter Connect Backend — Application Package Initializer
============================================================

Marketplace backend where owners post pet-care listings and sitters apply.
Served by uvicorn (`petsitter.main:app`), migrated by Alembic, tested with pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Listing / Application)  │  ← Business rules, state machine
    ├─────────────────────────────────────┤
    │      Store (Persistence Gateway)    │  ← CRUD + filtered queries, no rules
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes translate HTTP to service calls, services own the application
    lifecycle (accept cascades reject), and the store is the only layer that
    talks to SQLAlchemy.
"""

__version__ = "1.0.0"
