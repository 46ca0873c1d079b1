"""
Utility classes that define valid string options.
"""

from enum import StrEnum

__all__ = ["OperationRole"]


class OperationRole(StrEnum):
    """
    Roles a user or a user group can hold on a single operation. Each role
    includes the permissions of the roles listed below it.
    """

    ADMIN = "admin"  # write + can manage who has access to the operation
    WRITE = "write"  # read + can add and edit evidence
    READ = "read"  # can only view the operation
