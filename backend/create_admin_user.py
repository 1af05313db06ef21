import argparse
import getpass
import sys

# --- CONFIGURATION ---
# This script relies on config.py to load the .env file.
# You must run this script from the `backend` directory.
from showroom.core.database import SessionLocal, init_db
from showroom.core.security import hash_password
from showroom.models.user_model import User


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or reset an admin account for the dashboard")
    parser.add_argument("username")
    parser.add_argument("--role", default="admin")
    args = parser.parse_args(argv)

    password = getpass.getpass("Password: ")
    if len(password) < 6:
        print("FATAL ERROR: password must be at least 6 characters.")
        return 1

    init_db()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.username == args.username).first()
        if user:
            user.password = hash_password(password)
            user.role = args.role
            action = "updated"
        else:
            user = User(username=args.username, password=hash_password(password), role=args.role)
            db.add(user)
            action = "created"
        db.commit()
        print(f"Admin user '{args.username}' {action}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
