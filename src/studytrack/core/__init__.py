"""Core business logic.

Modules:
- enums: Resource, difficulty and activity enumerations
- errors: Error taxonomy shared by the store and the API
- study: Multi-table study use cases with activity logging
- stats: Progress statistics
"""

__all__ = [
    "enums",
    "errors",
    "stats",
    "study",
]
