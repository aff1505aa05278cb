"""
Script to create a user with a password for local testing.

    orgauth-create-user --email jane@example.com --password secret1 \
        --first-name Jane --last-name Doe --org "Jane's Org"
"""

import argparse
import asyncio
from typing import Optional

from app.core.auth import PasswordHasher
from app.core.config import get_settings
from app.core.database import create_engine, create_session_factory
from app.services import organisations as org_service
from app.services import users as user_service
from orgauth_shared.schemas.organisations import OrgCreateRequest
from orgauth_shared.schemas.users import RegisterRequest


async def create_user(
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: Optional[str] = None,
    org_name: Optional[str] = None,
) -> None:
    settings = get_settings()
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    async with session_factory() as session:
        user = await user_service.find_user_by_email(email, session)
        if user:
            print(f"User {email} already exists.")
        else:
            req = RegisterRequest(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password,
                phone=phone,
            )
            user = await user_service.create_user(req, hasher.hash(password), session)
            print(f"Created user: {email} ({user.id})")

        if org_name:
            org = await org_service.create_organisation(OrgCreateRequest(name=org_name), session)
            await org_service.add_membership(user.id, org.id, session)
            print(f"Added {email} to organisation '{org_name}' ({org.id}).")

        await session.commit()

    await engine.dispose()
    print("Done.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a local user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Password for the user")
    parser.add_argument("--first-name", default="Local", help="First name")
    parser.add_argument("--last-name", default="User", help="Last name")
    parser.add_argument("--phone", default=None, help="Phone number")
    parser.add_argument("--org", default=None, help="Also create this organisation and join it")

    args = parser.parse_args()

    asyncio.run(
        create_user(
            args.email,
            args.password,
            args.first_name,
            args.last_name,
            phone=args.phone,
            org_name=args.org,
        )
    )


if __name__ == "__main__":
    main()
