"""
Document store access
Wraps a motor database behind the small set of operations the services use,
so the collections can be swapped for another store in tests.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ReturnDocument

USERS = 'users'
POSTS = 'posts'

Filter = Dict[str, Any]
Sort = Sequence[Tuple[str, int]]


class MongoStore:
    def __init__(self, db):
        self.db = db

    async def ping(self) -> None:
        await self.db.command('ping')

    async def ensure_indexes(self) -> None:
        await self.db[USERS].create_index('email', unique=True)
        await self.db[POSTS].create_index([('createdAt', -1)])

    async def find(self, collection: str, filter: Optional[Filter] = None, sort: Optional[Sort] = None) -> List[Dict]:
        cursor = self.db[collection].find(filter or {})
        if sort:
            cursor = cursor.sort(list(sort))
        return await cursor.to_list(length=None)

    async def find_one(self, collection: str, filter: Filter) -> Optional[Dict]:
        return await self.db[collection].find_one(filter)

    async def insert_one(self, collection: str, document: Dict) -> Dict:
        doc = dict(document)
        result = await self.db[collection].insert_one(doc)
        doc['_id'] = result.inserted_id
        return doc

    async def update_one(self, collection: str, filter: Filter, changes: Dict) -> Optional[Dict]:
        """Apply $set changes and return the document as stored afterwards, or None"""
        return await self.db[collection].find_one_and_update(
            filter,
            {'$set': changes},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_one(self, collection: str, filter: Filter) -> bool:
        result = await self.db[collection].delete_one(filter)
        return result.deleted_count > 0
