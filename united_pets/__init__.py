"""
United Pets Backend — Application Package
==========================================

What: REST backend for the United Pets adoption platform (users, pets,
      adoption requests, donation campaigns).
Who:  Imported by uvicorn (`united_pets.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes (HTTP + auth gate)       │  ← status codes, dependencies
    ├─────────────────────────────────────┤
    │   Services (rules + ownership)      │  ← one stateless object per resource
    ├─────────────────────────────────────┤
    │   Models (ORM) & Schemas (API)      │  ← SQLAlchemy 2.0 + Pydantic v2
    ├─────────────────────────────────────┤
    │   Database / external adapters      │  ← async engine, Firebase, Stripe, SMTP
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
