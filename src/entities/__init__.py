"""
Entities (models) for receiving, managing and sending data.
"""

from math import ceil
from typing import Self

from pydantic import BaseModel, Field

from .operations import *
from .parameters import *
from .user import *
from .user_groups import *
from .utils import *


class GroupPage(BaseModel):
    """
    A paginated results model, holding pagination metadata and user groups.
    """

    page: int = Field(description="Current page for which groups were retrieved.")
    page_size: int = Field(description="Number of groups per page.")
    total_pages: int = Field(description="Total number of pages for pagination.")
    total_count: int = Field(description="Total number of distinct groups.")
    content: list[UserGroupAdminView]

    @classmethod
    def from_groups(
        cls,
        groups: list[UserGroupAdminView],
        pagination: Pagination,
    ) -> Self:
        """
        Create paginated results model from the complete list of groups.

        Parameters
        ----------
        groups : list[UserGroupAdminView]
            All groups matching the listing, in display order.
        pagination : Pagination
            The pagination object used to slice the groups.

        Returns
        -------
        page : GroupPage
            The paginated results model.
        """
        total = len(groups)
        start = pagination.offset
        page = cls(
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=ceil(total / pagination.page_size),
            total_count=total,
            content=groups[start : start + pagination.page_size],
        )
        return page
