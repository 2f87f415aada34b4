"""
Jokester – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``from jokester.models import *`` import.
"""

from jokester.models.user import User   # noqa: F401
from jokester.models.joke import Joke   # noqa: F401
