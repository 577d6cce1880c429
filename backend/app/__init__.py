"""
Chirper Backend: Application Package Initializer
================================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into thin layers, each calling only the one below it:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Account/Message)     │  ← Validation rules, orchestration
    ├─────────────────────────────────────┤
    │    Repositories (Data Access)       │  ← One method per SQL statement
    ├─────────────────────────────────────┤
    │  Models & Schemas / Database        │  ← SQLAlchemy ORM + Pydantic, sessions
    └─────────────────────────────────────┘

    Sessions are created per request and passed down explicitly;
    no layer reaches for a global connection.
"""

__version__ = "1.0.0"
