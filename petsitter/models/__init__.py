# Models package init
"""
ORM models. Importing this package registers every table with Base.metadata.
"""

from petsitter.models.application import Application
from petsitter.models.listing import Listing

__all__ = ["Application", "Listing"]
