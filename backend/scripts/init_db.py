"""
Initialize the database: create all tables and the default account.
Run with: python -m scripts.init_db [--email user@example.com] [--password password123]
"""

import argparse
import asyncio
from health_reporter.auth import TokenService
from health_reporter.config import get_settings
from health_reporter.database import Database
from health_reporter.services.account_service import AccountService

DEFAULT_EMAIL = "user@example.com"
DEFAULT_PASSWORD = "password123"


async def init(email: str, password: str):
    settings = get_settings()
    database = Database(settings.database_url)
    accounts = AccountService(database, TokenService(settings.jwt_secret), bcrypt_rounds=settings.bcrypt_rounds)

    print("Creating database tables...")
    await database.connect()
    print("All tables created successfully.")

    user = await accounts.ensure_account(email, password)
    print(f"Default user ready: {user.email} ({user.id})")
    await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and the default account")
    parser.add_argument("--email", default=DEFAULT_EMAIL)
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    args = parser.parse_args()
    asyncio.run(init(args.email, args.password))
