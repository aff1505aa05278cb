#!/usr/bin/env python3
"""Seed a development database with a demo user, organisations and a membership.

Usage:
    python scripts/seed_dev_data.py [--create-schema]

Uses DATABASE_URL (or the default local PostgreSQL URL). The demo login is
john.doe@example.com / password.
"""

import argparse
import asyncio
import uuid

from sqlalchemy import text

from app.core.auth import PasswordHasher
from app.core.config import get_settings
from app.core.database import create_engine, create_session_factory, init_db

# Deterministic UUIDs for reproducibility
USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
ORG_IDS = [uuid.UUID(f"00000000-0000-0000-0000-00000000000{i}") for i in (1, 2)]


def _db_id(engine, value: uuid.UUID):
    """SQLite stores UUID columns as 32-char hex strings."""
    return value.hex if engine.dialect.name == "sqlite" else value


async def seed(create_schema: bool = False) -> None:
    settings = get_settings()
    engine = create_engine(settings)
    if create_schema:
        await init_db(engine)
    async_session = create_session_factory(engine)

    password_hash = PasswordHasher(rounds=settings.bcrypt_rounds).hash("password")

    async with async_session() as session:
        await session.execute(text("""
            INSERT INTO users (id, first_name, last_name, email, password_hash, phone, created_at, updated_at)
            VALUES (:id, 'John', 'Doe', 'john.doe@example.com', :pw, '1234567890', CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
            ON CONFLICT DO NOTHING
        """), {"id": _db_id(engine, USER_ID), "pw": password_hash})

        orgs = [
            ("John's Organisation", "Default organisation for John"),
            ("Acme Robotics", None),
        ]
        for oid, (name, description) in zip(ORG_IDS, orgs):
            await session.execute(text("""
                INSERT INTO organisations (id, name, description, created_at, updated_at)
                VALUES (:id, :name, :description, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                ON CONFLICT DO NOTHING
            """), {
                "id": _db_id(engine, oid),
                "name": name,
                "description": description,
            })

        await session.execute(text("""
            INSERT INTO user_organisations (user_id, org_id, created_at)
            VALUES (:uid, :oid, CURRENT_TIMESTAMP)
            ON CONFLICT DO NOTHING
        """), {
            "uid": _db_id(engine, USER_ID),
            "oid": _db_id(engine, ORG_IDS[0]),
        })

        await session.commit()

    await engine.dispose()
    print(f"Seeded user '{USER_ID}' with {len(ORG_IDS)} organisations, 1 membership.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed development data.")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create tables first (local SQLite databases without migrations)",
    )
    args = parser.parse_args()
    asyncio.run(seed(args.create_schema))
