"""
Infrastructure Layer

Contains all external dependencies and implementations:
- REST API client and repositories
- Client storage, session and local cart
- Cart badge event channel and query cache
- Configuration management
- Logging infrastructure
"""
