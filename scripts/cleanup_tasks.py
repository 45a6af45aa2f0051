"""
Purge expired soft-deleted tasks once.

Same sweep the API runs on its cleanup interval, for cron or manual use.

Usage:
    python scripts/cleanup_tasks.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file
from dotenv import load_dotenv

load_dotenv()

from redis import RedisError

from app.core.config import settings
from app.core.logging_setup import setup_logging
from app.db.redis import create_redis_client
from app.db.repositories import TaskRepository
from app.services.cleanup_scheduler import run_cleanup_once
from app.services.task_service import TaskService

if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)

    print("=" * 50)
    print("Task Tracker Cleanup")
    print("=" * 50)
    print(f"Retention: {settings.TASK_RETENTION_DAYS} days")
    print()

    try:
        client = create_redis_client(settings)
        purged = run_cleanup_once(TaskService(TaskRepository(client)))
        client.close()
        print(f"SUCCESS: {purged} expired tasks purged")
        sys.exit(0)

    except RedisError as e:
        print(f"ERROR: Cleanup failed!")
        print(f"Details: {e}")
        sys.exit(1)
