"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- User, LearningPathRecord
"""

from api.models.models import User, LearningPathRecord

__all__ = [
    "User",
    "LearningPathRecord",
]
