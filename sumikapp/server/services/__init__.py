"""
Service layer.

Each service wraps one ``AsyncSession`` and implements the business rules of
one area (reports, sections, requirements, ...). Services raise the typed
errors from ``sumikapp.core.errors``; routers never touch the ORM directly.
"""
