"""Example: drive the service layer directly (no Flask).

Controllers are thin; the visit lifecycle lives in VisitService.
"""

import importlib

from visitor_register.config import get_settings_module
from visitor_register.container import build_container
from visitor_register.core.result import Err


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    result = container.visit_service.get_active()
    if isinstance(result, Err):
        print("error:", result.error)
        return
    for visit in result.value:
        print(visit.visit_id, visit.visitor_name, visit.patient_name, visit.check_in)


if __name__ == "__main__":
    main()
