"""
Domain enumerations shared by ORM models, schemas and services.

Stored in the database as their plain string values (`'house-sitting'`,
`'pending'`, ...), which is also what clients send and receive.
"""

from enum import Enum


class Species(str, Enum):
    DOG = "dog"
    CAT = "cat"
    BIRD = "bird"
    EXOTIC = "exotic"
    OTHER = "other"


class ListingType(str, Enum):
    HOUSE_SITTING = "house-sitting"
    DROP_IN_VISIT = "drop-in-visit"
    DAY_CARE = "day-care"
    WALKS = "walks"
    FEEDING = "feeding"
    OVERNIGHT = "overnight"


class ApplicationStatus(str, Enum):
    """
    Application lifecycle states.

        pending ──accept──▶ accepted
           │
           └──reject / sibling accepted──▶ rejected
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
