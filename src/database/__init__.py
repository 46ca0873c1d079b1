"""
Functions for connecting to and performing CRUD operations in a PostgreSQL database.
"""

from .connection import transaction, yield_cursor
from .operations import *
from .user_groups import *
from .users import *
