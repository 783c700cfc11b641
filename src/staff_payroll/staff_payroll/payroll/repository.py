from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import SalaryStatus
from .model import MonthlySalaryRecord, PayrollFigures


class SalaryRepository(Protocol):
    """Storage for monthly salary records, unique per (staff, month, year).

    Status changes are conditional writes: each one names the status the
    record must still have, and reports False when it no longer does.
    """

    def get_by_id(self, salary_id: int) -> Optional[MonthlySalaryRecord]:
        raise NotImplementedError

    def get_for_period(self, *, staff_id: int, month: int, year: int) -> Optional[MonthlySalaryRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        staff_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
    ) -> Sequence[MonthlySalaryRecord]:
        """Matching records, latest period first."""

        raise NotImplementedError

    def save_draft(self, *, staff_id: int, month: int, year: int, figures: PayrollFigures) -> Optional[int]:
        """Insert or overwrite the draft for the period.

        Returns the record id, or None when nothing was written: a non-draft
        record already holds the period, or a concurrent save of the same
        period won.
        """

        raise NotImplementedError

    def transition(self, *, salary_id: int, from_status: SalaryStatus, to_status: SalaryStatus) -> bool:
        raise NotImplementedError

    def update_commission(self, *, salary_id: int, commission, net_salary, negative_pay_flagged: bool) -> bool:
        """Draft-only commission change."""

        raise NotImplementedError

    def delete_draft(self, salary_id: int) -> bool:
        raise NotImplementedError

    def delete_drafts(self, salary_ids: Iterable[int]) -> Sequence[int]:
        """Delete the drafts among ``salary_ids`` and return the deleted ids."""

        raise NotImplementedError
