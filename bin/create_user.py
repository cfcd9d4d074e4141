# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Operator script – creates a user account directly in the database.

    python bin/create_user.py

Reads DATABASE_URL / PASSWORD_HASH_ROUNDS from the environment or
etc/app.conf, creates the ``users`` table if needed, then prompts for the
email and password.  Uses the same validation and hashing as ``POST /users``.
"""

import sys
import os
from getpass import getpass

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/create_user.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.errors import ConflictError, ValidationError   # noqa: E402
from database import SessionLocal, engine, init_db       # noqa: E402
from models.user import User                             # noqa: E402
from store.sqlstore import SQLUserRepository             # noqa: E402


def main() -> int:
    init_db(engine)
    repository = SQLUserRepository(SessionLocal)

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        print("[create_user] Passwords do not match.", file=sys.stderr)
        return 1

    user = User(email=email, password=pw1)
    try:
        repository.create(user)
    except ValidationError as exc:
        for field, message in sorted(exc.errors.items()):
            print(f"[create_user] {field}: {message}", file=sys.stderr)
        return 1
    except ConflictError:
        print(f"[create_user] '{email}' already exists – skipping.", file=sys.stderr)
        return 1
    finally:
        user.sanitize()

    print(f"[create_user] User '{email}' created with id {user.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
