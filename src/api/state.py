from typing import Optional

import asyncpg

from storage.request_store import RequestStore

# Global instances initialized at startup (None when DATABASE_URL is unset)
db_pool: Optional[asyncpg.Pool] = None
request_store: Optional[RequestStore] = None
