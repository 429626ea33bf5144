#!/usr/bin/env python3
"""
Database management script for the time reporting backend.
Creates and drops the schema for the configured DATABASE_URL.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from time_reporting.config import settings
from time_reporting.infrastructure.db.models import create_all_tables, drop_all_tables


def create_tables():
    """Create all tables that do not exist yet."""
    print(f"Creating tables on {settings.database_url}...")
    create_all_tables()


def drop_tables():
    """Drop all tables - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Dropping tables...")
        drop_all_tables()
    else:
        print("Drop cancelled.")


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Resetting database...")
        drop_all_tables()
        create_all_tables()
    else:
        print("Database reset cancelled.")


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create         - Create all tables")
        print("  drop           - Drop all tables (WARNING: drops all data)")
        print("  reset          - Drop and recreate all tables (WARNING: drops all data)")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_tables()
    elif command_name == "drop":
        drop_tables()
    elif command_name == "reset":
        reset_database()
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
