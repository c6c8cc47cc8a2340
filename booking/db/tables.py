"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE). Order matters for FK:
children first.
"""
ALL_TABLE_NAMES = (
    "queued_jobs",
    "notifications",
    "appointments",
    "users",
)

# Tables cleared by scripts/reset_db.py; users are kept.
RESETTABLE_TABLE_NAMES = (
    "queued_jobs",
    "notifications",
    "appointments",
)
