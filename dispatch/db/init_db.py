"""
Database initialization script.

Run this to create the database tables:
    python -m dispatch.db.init_db
"""

from dispatch.db.database import DATABASE_URL, init_db

if __name__ == "__main__":
    print(f"Initializing database at {DATABASE_URL}...")
    init_db()
    print("Database initialization complete!")
