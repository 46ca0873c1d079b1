"""
Router definitions for API endpoints.
"""

from .user_groups import admin_router as admin_user_group_router
from .user_groups import operation_router
from .user_groups import router as user_group_router

ALL = [
    admin_user_group_router,
    user_group_router,
    operation_router,
]
