"""
Restaurant POS REST API.

- models: SQLAlchemy ORM models
- repositories: Data Store interface and SQL implementation
- services: lifecycle coordinator and supporting domain services
- routers: FastAPI endpoints
"""
