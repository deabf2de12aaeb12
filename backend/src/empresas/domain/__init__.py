"""
Domain package - Core business logic with no external dependencies.

This package contains pure Python domain models, the error taxonomy,
the persistence ports and the reporting window rules.
"""
