"""
Domain layer module.

Core types of the counter sync service. Independent of infrastructure
concerns; depends only on protocols (interfaces).

Key components:
- models.py: Domain models (Pydantic-based data structures)
- protocols.py: Protocol definitions for stores and the external counter source
- exceptions.py: Rejection taxonomy and infrastructure errors
"""
