"""Example: drive the service layer directly (no Flask).

Controllers are thin; business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.institute_system.institute_system.common.app_logger import setup_logging
from src.institute_system.institute_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG)

    print(container.timetable_service.has_conflict(class_id=1, day_of_week=1, start="09:00", end="10:00"))
    print(container.report_service.build_student_summary(student_id=1).to_dict())


if __name__ == "__main__":
    main()
