"""
Create a user in users.json (e.g. an extra admin). Run from project root:
  python -m lifetracker.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m lifetracker.scripts.create_user alice her-secure-password user
"""
import argparse
import asyncio
import sys

from lifetracker.core.config import get_settings
from lifetracker.core.storage import Storage, StorageError
from lifetracker.services.errors import ValidationFailure
from lifetracker.services.users import add_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Life Tracker user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    parser.add_argument("--data-dir", default=None, help="Data directory (default: DATA_DIR setting)")
    args = parser.parse_args(argv)

    storage = Storage(args.data_dir or get_settings().DATA_DIR)
    try:
        user = asyncio.run(add_user(storage, args.username, args.password, args.role))
    except ValidationFailure as e:
        print(e.message, file=sys.stderr)
        return 1
    except StorageError as e:
        print(f"Could not update users file: {e.message}", file=sys.stderr)
        return 1
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
