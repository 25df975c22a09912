"""
Operator commands.

There is no registration flow, so admin accounts are added from the
command line::

    python -m bookstore.manage create-admin --email admin@bookstore.com \
        --password 'secret' --name 'Store Admin'
"""

import argparse
import logging
import sys
from typing import List, Optional

from .auth import ADMIN_ROLE, hash_password
from .config import get_settings
from .storage import DocumentStore, JsonDocumentStore, load_users, save_users


logger = logging.getLogger(__name__)


def create_admin(store: DocumentStore, email: str, password: str, name: str = "") -> dict:
    """Append an admin user, or raise ``ValueError`` if the email is taken."""
    users = load_users(store)
    if any(u.get("email") == email for u in users):
        raise ValueError(f"A user with email {email} already exists")

    ids = [u.get("id") for u in users if isinstance(u.get("id"), int)]
    user = {
        "id": max(ids, default=0) + 1,
        "email": email,
        "password": hash_password(password),
        "role": ADMIN_ROLE,
        "name": name,
    }
    users.append(user)
    save_users(store, users)
    return user


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="bookstore.manage")
    commands = parser.add_subparsers(dest="command", required=True)

    admin = commands.add_parser("create-admin", help="add an admin user")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--name", default="")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    store = JsonDocumentStore(get_settings().data_dir)

    if args.command == "create-admin":
        try:
            user = create_admin(store, args.email, args.password, args.name)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        logger.info("Admin user %s created with id %s", user["email"], user["id"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
