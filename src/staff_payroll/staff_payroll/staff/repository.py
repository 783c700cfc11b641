from __future__ import annotations

from typing import Optional, Protocol

from .model import Staff


class StaffRepository(Protocol):
    """Read-only view of the staff directory.

    The directory itself is owned elsewhere; services only read identity,
    status, quota and daily rate through this interface.
    """

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError
