"""
Utilities module.

Shared helpers: float32 arithmetic, filesystem access, configuration
schemas and logging setup.
"""
