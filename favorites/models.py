"""
favorites/models.py -- Domain dataclass for saved meals.

Pure data container, zero logic. Ownership rules live in favorites/service.py,
persistence in favorites/store.py.
"""

from dataclasses import dataclass
from typing import Optional

# meal_id is stored in a signed 64-bit column.
MAX_MEAL_ID = 2**63 - 1


@dataclass
class FavoriteMeal:
    """A meal saved by one user.

    (user_id, meal_id) is unique: a user saves a given meal at most once.
    meal_id is the identifier of the meal in the recipe catalogue the client
    browses; it is not a key into any table here.

    id is None before the record is written to the database.
    """

    user_id: int
    meal_id: int
    meal_name: str
    image_url: str
    added_at: str = ""  # ISO 8601, set by store on insert
    id: Optional[int] = None
