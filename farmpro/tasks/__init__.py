"""
Celery tasks package for background job processing.
"""

from .celery_app import celery_app
from .boost_expiry import expire_boosts_task

__all__ = ["celery_app", "expire_boosts_task"]
