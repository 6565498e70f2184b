"""
UYNM Backend — Application Package Initializer
================================================

What: Marks `uynm_api` as the importable package for the website backend.
Who:  Used by uvicorn (`uynm_api.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a thin request-routing and validation facade:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP envelope)       │  ← status codes, background tasks
    ├─────────────────────────────────────┤
    │   Schemas + Validation (rules)      │  ← reject bad input before mutation
    ├─────────────────────────────────────┤
    │      Services (domain policies)     │  ← duplicate checks, soft deletes
    ├─────────────────────────────────────┤
    │  Collaborators (store, identity,    │  ← constructed in create_app()
    │  mail transport)                    │    and injected per request
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
