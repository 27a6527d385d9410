"""Seed the HR reviewer account."""

import sys

from app import create_app
from utils.bootstrap import ensure_hr_account


def main() -> int:
    app = create_app()
    with app.app_context():
        password = app.config.get("HR_PASSWORD")
        if not password:
            print("Set HR_PASSWORD to create the HR account.", file=sys.stderr)
            return 1
        user, created = ensure_hr_account(
            app.config["HR_USERNAME"], app.config["HR_EMAIL"], password
        )
        action = "created" if created else "already exists"
        print(f"HR user {action}: {user.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
