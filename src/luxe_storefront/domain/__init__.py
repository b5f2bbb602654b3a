"""
Domain Layer

Entities, value objects and repository contracts for the storefront core.
"""
