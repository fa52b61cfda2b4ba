"""
SQLAlchemy models package.
Import all models here to ensure they're registered with Base.metadata.
"""
from customer_api.models.customers import Customer, Gender

__all__ = [
    "Customer",
    "Gender",
]
