"""
Infrastructure layer.

Implementations of the application ports:

- Persistence (SQLAlchemy repositories, mappers, the Unit of Work)
- Web framework (FastAPI routers, Pydantic schemas)
- Per-learner locking and dependency injection wiring
"""
