"""MedStore database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load sample users, categories and products
"""

import argparse
import sys


def setup_database():
    from medstore.domain import medstore
    from medstore.utils.db import setup_db

    print("Initializing medstore domain...")
    medstore.init()
    print("Creating database schema...")
    setup_db(medstore)
    print("Done.")


def drop_database():
    from medstore.domain import medstore
    from medstore.utils.db import drop_db

    print("Initializing medstore domain...")
    medstore.init()
    print("Dropping database schema...")
    drop_db(medstore)
    print("Done.")


def seed_database():
    from medstore.domain import medstore
    from medstore.utils.seed import seed

    print("Initializing medstore domain...")
    medstore.init()
    if seed(medstore):
        print("Database seeded.")
    else:
        print("Sample data already present, nothing to do.")


def main():
    parser = argparse.ArgumentParser(description="MedStore database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load sample data")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
