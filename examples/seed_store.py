"""Seed a local store with sample domains and a session.

Registration and verification flows live outside this service, so local
runs need a populated store. Usage:

    python -m examples.seed_store
    uvicorn src.main:app --reload
    curl -X POST localhost:8000/api/domains/sync-busuanzi \\
         -H "Authorization: Bearer <printed token>" \\
         -H "Content-Type: application/json" -d '{"domainName": "example.com"}'
"""

import asyncio

from src.domain.models import Domain
from src.infrastructure.storage.json_store import JsonFileStore
from src.shared.config import Settings

SAMPLE_USER_ID = "user-1"

SAMPLE_DOMAINS = [
    Domain(name="example.com", owner_id=SAMPLE_USER_ID, verified=True),
    Domain(name="blog.example.com", owner_id=SAMPLE_USER_ID, verified=False),
    Domain(name="someone-else.org", owner_id="user-2", verified=True),
]


async def seed(data_file: str) -> str:
    store = JsonFileStore(data_file)
    for domain in SAMPLE_DOMAINS:
        await store.save_domain(domain)
    session = await store.create_session(SAMPLE_USER_ID, ttl_seconds=7 * 24 * 3600)
    return session.token


if __name__ == "__main__":
    settings = Settings()
    token = asyncio.run(seed(settings.data_file))
    print(f"Seeded {len(SAMPLE_DOMAINS)} domains into {settings.data_file}")
    print(f"Session token for {SAMPLE_USER_ID}: {token}")
