"""
Feature modules for FitRecap.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models or plain dataclasses
- schemas.py - Pydantic schemas
- repository.py - Data access (optional)
- service/calculator modules - Business logic
"""
