# app/services/__init__.py
"""
Business logic services.
"""

from app.services.email_service import EmailService

__all__ = [
    "EmailService",
]
