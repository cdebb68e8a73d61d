"""
Termhunt – SQLAlchemy ORM models package.

Imports all model classes so the app and the test suite can discover them
through a single ``from termhunt.models import *`` import.
"""

from termhunt.models.user import User               # noqa: F401
from termhunt.models.listing import Listing         # noqa: F401
from termhunt.models.vote import Vote               # noqa: F401
from termhunt.models.view_event import ViewEvent    # noqa: F401
