"""
Blog API — Application Package Initializer
===========================================

What: Marks the `blog_api` directory as a Python package.
Who:  Imported by uvicorn (`blog_api.main:app`), Alembic and pytest.

Architecture Note:
    The service follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← BlogService, ImageService
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate HTTP into service calls; services never see a Request
    object, only plain values (the asset base URL is passed in as a string).
"""

__version__ = "1.0.0"
