"""
Simple migration script: adds missing columns to existing tables.
Safe to run multiple times (checks before altering).
"""

from sqlalchemy import text, inspect
from database import engine, Base

# Import all models so Base.metadata knows about them
from models.medicine import Medicine  # noqa: F401
from models.dose import Dose  # noqa: F401


COLUMN_MIGRATIONS = {
    "medicines": [
        ("archived", "BOOLEAN NOT NULL DEFAULT FALSE"),
        ("archived_at", "TIMESTAMP"),
        ("preset_times", "VARCHAR(60)"),
    ],
    "doses": [
        ("created_at", "TIMESTAMP"),
    ],
}


def get_existing_columns(conn, table_name: str) -> set:
    """Get the set of column names that already exist in a table."""
    insp = inspect(conn)
    if not insp.has_table(table_name):
        return set()
    return {col["name"] for col in insp.get_columns(table_name)}


def migrate(bind=None):
    bind = bind or engine
    added = []
    with bind.connect() as conn:
        # 1. Create any tables that don't exist yet
        Base.metadata.create_all(bind=conn)
        conn.commit()
        print("  ✓ Tables created/verified")

        # 2. Add columns that older databases are missing
        for table_name, migrations in COLUMN_MIGRATIONS.items():
            existing = get_existing_columns(conn, table_name)
            for col_name, col_type in migrations:
                if col_name in existing:
                    continue
                conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {col_name} {col_type}"))
                conn.commit()
                added.append(f"{table_name}.{col_name}")
                print(f"  ✓ Added column: {table_name}.{col_name}")

        # 3. Keep archived/archived_at consistent on legacy rows
        result = conn.execute(text(
            "UPDATE medicines SET archived_at = NULL WHERE archived = FALSE AND archived_at IS NOT NULL"
        ))
        conn.commit()
        if result.rowcount:
            print(f"  ✓ Cleared archived_at on {result.rowcount} active medicine(s)")

    print("  ✓ Migration complete")
    return added


if __name__ == "__main__":
    print("Running migrations...")
    migrate()
