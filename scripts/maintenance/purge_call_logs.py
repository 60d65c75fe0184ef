# scripts/maintenance/purge_call_logs.py
"""
Retention sweep for the FASTag call ledger and expired saved searches.
Meant for a daily cron.
Usage: python scripts/maintenance/purge_call_logs.py
       python scripts/maintenance/purge_call_logs.py --days 60
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from freight_tracking.config import settings
from freight_tracking.database import SessionLocal
from freight_tracking.services.call_ledger import purge_call_logs
from freight_tracking.services.search_history import purge_expired_searches


def main():
    parser = argparse.ArgumentParser(description="Delete old FASTag call log rows")
    parser.add_argument("--days", type=int, default=settings.CALL_LOG_RETENTION_DAYS,
                        help=f"keep this many days (default {settings.CALL_LOG_RETENTION_DAYS})")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        removed = purge_call_logs(db, args.days)
        expired = purge_expired_searches(db)
    finally:
        db.close()
    print(f"🧹 Removed {removed} call log rows older than {args.days} days")
    print(f"🧹 Removed {expired} expired saved searches")


if __name__ == "__main__":
    main()
