from __future__ import annotations

import importlib

from visitor_register.config import get_settings_module
from visitor_register.database.bootstrap import ensure_demo_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print("    admin@casaapoio.com / admin123 (ADMIN)")
    print("    recepcao@casaapoio.com / recepcao123 (RECEPCAO)")


if __name__ == "__main__":
    main()
