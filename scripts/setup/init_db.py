# scripts/setup/init_db.py
"""
Initialize database — creates the crossing store and call ledger.
Assignment, consignment and warehouse tables belong to other services and
must already exist; this script only reports whether they are visible.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from freight_tracking.database import create_tables, engine, owned_tables
from freight_tracking.config import settings

EXTERNAL_TABLES = ("vehicle_assignments", "owned_vehicles", "hired_vehicles", "drivers",
                   "consignments", "warehouses")


def main():
    print("🗄️  Freight Tracking DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tracking tables...")
    create_tables()
    for table in owned_tables():
        print(f"   ✓ {table.name}")

    existing = set(inspect(engine).get_table_names())
    print("\n🔗 Tables read from other services:")
    missing = 0
    for name in EXTERNAL_TABLES:
        if name in existing:
            print(f"   ✓ {name}")
        else:
            print(f"   ✗ {name} (missing — tracking and journey endpoints will fail)")
            missing += 1

    if missing:
        print(f"\n⚠️  {missing} external table(s) not found")
    print("\n🎉 Database ready! Start the backend with:")
    print(f"   uvicorn freight_tracking.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT}")


if __name__ == "__main__":
    main()
