"""
Check the Redis connection used by the API.

Usage:
    python scripts/check_redis.py
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
from app.db.redis import DELETED_TASKS_KEY, create_redis_client

print("=" * 60)
print("Testing Redis Connection")
print("=" * 60)
print(f"Redis: {settings.REDIS_HOST}:{settings.REDIS_PORT} db={settings.REDIS_DB}")
print()

try:
    client = create_redis_client(settings)
    info = client.info("server")
    print("✓ Connection successful!")
    print(f"Redis version: {info.get('redis_version')}")
    print(f"Keys in db: {client.dbsize()}")
    print(f"Soft-deleted tasks awaiting purge: {client.zcard(DELETED_TASKS_KEY)}")
    client.close()

except RedisError as e:
    print(f"✗ Connection failed: {e}")
    sys.exit(1)

print("=" * 60)
