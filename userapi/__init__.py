"""
User API — Application Package Initializer
============================================

What: Marks the `userapi` directory as a Python package.
Who:  Imported by uvicorn, Alembic and pytest.

Architecture Note:
    The service is a thin layered stack around a single table:

    ┌─────────────────────────────────────┐
    │         Routes (HTTP Layer)         │  ← status codes, request parsing
    ├─────────────────────────────────────┤
    │      Repositories (Data Access)     │  ← CRUD + partial update
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Connection Pool)      │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    Routes never issue SQL; every read and write goes through UserRepository.
"""

__version__ = "1.0.0"
