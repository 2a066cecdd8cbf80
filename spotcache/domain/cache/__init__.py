"""
Cache Domain Module

Domain-Driven Design implementation for cache management.
Contains entities, value objects, repository interfaces, and domain services.
"""
