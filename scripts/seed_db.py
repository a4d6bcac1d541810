from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.team_tasks.team_tasks.database.bootstrap import (
    DEMO_EMPLOYEE_EMAIL,
    DEMO_MANAGER_CODE,
    DEMO_MANAGER_EMAIL,
    ensure_demo_team,
)


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_team(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}\n"
        f"    manager:  {DEMO_MANAGER_EMAIL} (code {DEMO_MANAGER_CODE})\n"
        f"    employee: {DEMO_EMPLOYEE_EMAIL}"
    )


if __name__ == "__main__":
    main()
