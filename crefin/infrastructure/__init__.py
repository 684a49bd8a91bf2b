"""
Infrastructure layer for the Crefin financial tracker.

This layer contains the implementation details for external systems integration:
- Database (SQLAlchemy; PostgreSQL in production, SQLite for development and tests)
- Authentication (JWT bearer tokens)
- The payment-time prediction service (HTTP)

The infrastructure layer implements interfaces defined in the domain layer,
following the Dependency Inversion Principle of Clean Architecture.
"""
