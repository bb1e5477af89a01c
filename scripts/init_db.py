#!/usr/bin/env python3
"""
Initialize the finance dashboard database.

Run this script to create the database schema and store the default PIN.
Pass --with-sample-data to add the demo transactions as well.
"""
import sys

from finance_dashboard.config.settings import DashboardSettings
from finance_dashboard.database.connection import DatabaseConfig, DatabaseManager
from finance_dashboard.repositories.sqlite_transaction_repository import (
    SQLiteSettingsRepository,
    SQLiteTransactionRepository,
)
from finance_dashboard.services.sample_data import sample_transactions
from finance_dashboard.services.transaction_service import TransactionService

def main():
    """initialize the database."""
    settings = DashboardSettings.from_config()

    config = DatabaseConfig(settings.database_path)
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        db.initialize()

        service = TransactionService(
            SQLiteTransactionRepository(db),
            SQLiteSettingsRepository(db),
            tz=settings.tz,
        )
        service.ensure_pin(settings.default_pin)

        if "--with-sample-data" in sys.argv[1:]:
            saved = service.add_sample_data(sample_transactions(tz=settings.tz))
            print(f"✓ Added {len(saved)} sample transactions")

        row = db.get_connection().execute(
            "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()

        if row:
            print(f"✓ Database initialized successfully!")
            print(f"  Schema version: {row['version']}")
            print(f"  Description: {row['description']}")
        else:
            print("✗ Database initialization may have failed")

if __name__ == "__main__":
    main()
