"""Bulk-import students from a JSON file of ``{"23HP1A0201": "Name", ...}``.

Usage: python scripts/import_students.py students.json
"""
from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "college_portal"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from college_portal.container import build_container

logger = logging.getLogger("import_students")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path, help="JSON file mapping registration number -> name")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    mapping = json.loads(args.path.read_text(encoding="utf-8"))
    if not isinstance(mapping, dict):
        logger.error("%s must contain a JSON object", args.path)
        return 1

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        email_domain=getattr(settings, "EMAIL_DOMAIN", "aliet.ac.in"),
    )
    result = container.roster_service.import_students({str(k): str(v) for k, v in mapping.items()})
    accounts = container.user_service.ensure_student_accounts(result.students)

    for reg_no, warning in sorted(result.warnings.items()):
        logger.warning("%s: %s (imported with defaults)", reg_no, warning)
    logger.info("Imported %d students, created %d logins", result.imported, accounts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
