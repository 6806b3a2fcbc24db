"""
Document store package.

Keep package import side-effects to a minimum: adapters pull in
firebase_admin and SQLAlchemy, so import them from their own modules.
"""

__all__ = [
    "interface",
    "models",
    "factory",
    "firestore_adapter",
    "sql_adapter",
]
