# scripts/init_db.py
import os

from release_calendar.repo import SqliteRepo

DB = os.path.join("data", "calendar.db")
SqliteRepo(DB).init_schema()
print("initialized db at", DB)
