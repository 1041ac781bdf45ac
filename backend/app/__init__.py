"""
Questions Portal Backend — Application Package
===============================================

Crowd-sourced interview questions: users submit questions, report where and
when they were asked (encounters), vote on them, and browse them by
company, location, role, type and date.

Layers:
    routes/    HTTP only (FastAPI routers)
    services/  business rules (filtering, vote tally, ownership checks)
    schemas/   Pydantic API contracts
    models/    SQLAlchemy ORM models
    database   async engine and session-per-request dependency
"""

__version__ = "1.0.0"
