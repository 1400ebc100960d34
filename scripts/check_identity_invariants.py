#!/usr/bin/env python3
"""Report stored contacts that break identity invariants.

Lists secondaries linking to a missing contact, secondaries linking to another
secondary, and identity groups (records sharing an email, phone number or link)
holding more than one primary. Read-only. Exit code 1 when anything is found.
Run from repo root with .env (NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD).
"""
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402
from neo4j import GraphDatabase  # noqa: E402

from contactlink.domain import find_violations  # noqa: E402
from contactlink.infrastructure import Neo4jContactStore  # noqa: E402

load_dotenv(REPO_ROOT / ".env")


def main() -> int:
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    database = os.environ.get("NEO4J_DATABASE", "").strip() or None
    driver = GraphDatabase.driver(uri, auth=(user, password))
    try:
        records = Neo4jContactStore(driver, database=database).list_all()
    finally:
        driver.close()

    violations = find_violations(records)
    if not violations:
        print(f"Checked {len(records)} contact(s); no violations.")
        return 0
    for violation in violations:
        print(f"[{violation.kind}] {violation.detail}")
    print(f"Checked {len(records)} contact(s); {len(violations)} violation(s).")
    return 1


if __name__ == "__main__":
    sys.exit(main())
