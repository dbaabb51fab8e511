"""CLI script that registers the first admin account with the auth provider."""

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.utils.identity import IdentityError, IdentityProvider, get_identity_provider
from app.utils.security import Role

logger = logging.getLogger("seed_admin")


def seed_admin(provider: IdentityProvider, email: str, password: str) -> dict:
    return provider.sign_up(email, password, metadata={"role": Role.ADMIN.value})


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin user in the auth provider")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@example.com"), help="Admin email")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"), help="Admin password (or ADMIN_PASSWORD)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    if not args.password:
        logger.error("No password given: pass --password or set ADMIN_PASSWORD")
        return 1

    logger.info("Starting admin user seeding for %s", args.email)
    try:
        user = seed_admin(get_identity_provider(), args.email, args.password)
    except IdentityError as e:
        logger.error("Error creating admin user: %s", e.message)
        return 1
    logger.info("Admin user created (id=%s)", user.get("id"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
