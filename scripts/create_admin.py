"""
Create an administrator account.

Usage:
    python scripts/create_admin.py <email> <display name>

The password is read from the ADMIN_PASSWORD environment variable or
prompted for.
"""

import getpass
import os
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
from app.core.errors import AppError
from app.db.redis import create_redis_client
from app.db.repositories import SessionRepository, UserRepository
from app.services.user_service import UserService

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)

    email, display_name = sys.argv[1], sys.argv[2]
    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")

    print("=" * 50)
    print("Task Tracker Admin Creation")
    print("=" * 50)
    print()

    try:
        client = create_redis_client(settings)
        service = UserService(UserRepository(client), SessionRepository(client))
        user = service.create_admin(email, display_name, password)
        client.close()
        print(f"SUCCESS: Admin {user.email} created (id {user.id})")
        sys.exit(0)

    except AppError as e:
        print(f"ERROR: {e.message} ({e.code})")
        sys.exit(1)
    except RedisError as e:
        print(f"ERROR: Redis unavailable!")
        print(f"Details: {e}")
        sys.exit(1)
