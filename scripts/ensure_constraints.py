#!/usr/bin/env python3
"""Create the Neo4j unique constraints the contact store relies on.

Contact.id, IdentityLock.key and ContactSequence.name must be unique for id
assignment and per-key serialization to hold. Run from repo root with .env
(NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD, optional NEO4J_DATABASE). Idempotent.
"""
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402
from neo4j import GraphDatabase  # noqa: E402

from contactlink.infrastructure import ensure_contact_constraints  # noqa: E402

load_dotenv(REPO_ROOT / ".env")


def main() -> int:
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    database = os.environ.get("NEO4J_DATABASE", "").strip() or None
    driver = GraphDatabase.driver(uri, auth=(user, password))
    try:
        ensure_contact_constraints(driver, database)
        print(f"Contact constraints present on {uri}.")
        return 0
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
