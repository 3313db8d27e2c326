from datetime import datetime, timezone
from typing import List
import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError, PyMongoError

from .auth import hash_password, verify_password, needs_rehash
from .core import AUTH_ATTEMPTS, POST_WRITES
from .errors import Conflict, Unauthorized, NotFound, InternalError
from .schemas.posts import PostIn, PostOut
from .storage import USERS, POSTS

logger = logging.getLogger(__name__)

FEED_ORDER = [('createdAt', -1), ('_id', -1)]


def _now() -> datetime:
    # BSON datetimes carry milliseconds only
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _post_filter(post_id: str) -> dict:
    try:
        return {'_id': ObjectId(post_id)}
    except (InvalidId, TypeError):
        raise NotFound('Post not found') from None


# accounts
async def authenticate(store, email: str, password: str, mode: str) -> dict:
    """Sign a user up or in; returns the public account payload"""
    try:
        if mode == 'signup':
            if await store.find_one(USERS, {'email': email}):
                AUTH_ATTEMPTS.labels(mode, 'conflict').inc()
                raise Conflict('User already exists')
            try:
                user = await store.insert_one(USERS, {
                    'email': email,
                    'password': hash_password(password),
                    'createdAt': _now(),
                })
            except DuplicateKeyError:
                # lost a race with a concurrent signup for the same email
                AUTH_ATTEMPTS.labels(mode, 'conflict').inc()
                raise Conflict('User already exists')
        else:
            user = await store.find_one(USERS, {'email': email})
            if not user or not verify_password(password, user.get('password')):
                AUTH_ATTEMPTS.labels(mode, 'unauthorized').inc()
                raise Unauthorized('Invalid credentials')
            if needs_rehash(user['password']):
                await store.update_one(USERS, {'_id': user['_id']}, {'password': hash_password(password)})
                logger.info('Upgraded stored credential for %s', email)
    except PyMongoError as e:
        logger.error('Authentication failed for %s: %s', email, e)
        AUTH_ATTEMPTS.labels(mode, 'error').inc()
        raise InternalError('Authentication failed')

    AUTH_ATTEMPTS.labels(mode, 'ok').inc()
    return {'email': user['email']}


# posts
async def list_posts(store) -> List[PostOut]:
    try:
        docs = await store.find(POSTS, sort=FEED_ORDER)
    except PyMongoError as e:
        logger.error('Failed to fetch posts: %s', e)
        raise InternalError('Failed to fetch posts')
    return [PostOut.from_document(d) for d in docs]


async def featured_post(store) -> PostOut:
    """Newest post, shown as the feed highlight"""
    posts = await list_posts(store)
    if not posts:
        raise NotFound('No posts yet')
    return posts[0]


async def create_post(store, payload: PostIn) -> PostOut:
    now = _now()
    try:
        doc = await store.insert_one(POSTS, {
            'title': payload.title,
            'content': payload.content,
            'imageUrl': payload.image_url,
            'createdAt': now,
            'updatedAt': now,
        })
    except PyMongoError as e:
        logger.error('Failed to create post: %s', e)
        raise InternalError('Failed to create post', success=False)
    POST_WRITES.labels('create').inc()
    logger.info('Created post %s', doc['_id'])
    return PostOut.from_document(doc)


async def get_post(store, post_id: str) -> PostOut:
    query = _post_filter(post_id)
    try:
        doc = await store.find_one(POSTS, query)
    except PyMongoError as e:
        logger.error('Failed to fetch post %s: %s', post_id, e)
        raise InternalError('Failed to fetch post')
    if not doc:
        raise NotFound('Post not found')
    return PostOut.from_document(doc)


async def update_post(store, post_id: str, payload: PostIn) -> PostOut:
    query = _post_filter(post_id)
    try:
        doc = await store.update_one(POSTS, query, {
            'title': payload.title,
            'content': payload.content,
            'imageUrl': payload.image_url,
            'updatedAt': _now(),
        })
    except PyMongoError as e:
        logger.error('Failed to update post %s: %s', post_id, e)
        raise InternalError('Failed to update post')
    if not doc:
        raise NotFound('Post not found')
    POST_WRITES.labels('update').inc()
    return PostOut.from_document(doc)


async def delete_post(store, post_id: str) -> None:
    query = _post_filter(post_id)
    try:
        deleted = await store.delete_one(POSTS, query)
    except PyMongoError as e:
        logger.error('Failed to delete post %s: %s', post_id, e)
        raise InternalError('Failed to delete post')
    if not deleted:
        raise NotFound('Post not found')
    POST_WRITES.labels('delete').inc()
    logger.info('Deleted post %s', post_id)
