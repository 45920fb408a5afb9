# create_admin.py
#
# Admin accounts cannot self-register; provision them from the shell:
#
#   python create_admin.py admin@shop.com "Store Admin"
#
# The password is prompted for (not echoed).

import getpass
import sys

from sqlmodel import Session

from storefront.core.security import hash_password
from storefront.database import create_db_and_tables, engine
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import MIN_PASSWORD_LENGTH


def main():
    if len(sys.argv) < 2:
        print("Usage: python create_admin.py <email> [name]")
        sys.exit(1)

    email = sys.argv[1].strip().lower()
    name = sys.argv[2] if len(sys.argv) > 2 else "Administrator"

    password = getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        sys.exit(1)

    create_db_and_tables()
    repo = UserRepository()

    with Session(engine) as session:
        if repo.get_by_email(session, email):
            print(f"A user with email {email} already exists.")
            sys.exit(1)

        user = repo.create(
            session,
            User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role="admin",
            ),
        )
        print(f"Admin created: {user.id} ({user.email})")


if __name__ == "__main__":
    main()
