"""Example: use the service layer directly (no Flask).

Controllers stay thin; the leave and payroll rules live in the services.
"""

import importlib
import logging

from config import get_settings_module

from src.staff_payroll.staff_payroll.container import build_container
from src.staff_payroll.staff_payroll.core.enums import Role

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    quota = container.leave_service.get_quota(staff_id=1)
    logger.info("Leave quota: %s", quota.to_dict())

    draft = container.payroll_service.compute_draft(current_role=Role.MANAGER, staff_id=1, month=1, year=quota.year)
    logger.info("Salary draft: %s", draft.to_dict())


if __name__ == "__main__":
    main()
