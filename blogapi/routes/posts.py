from fastapi import APIRouter, Depends
from typing import List
from ..schemas.posts import PostIn, PostOut, PostCreatedOut
from ..schemas.users import ActionOkOut
from ..crud import list_posts, featured_post, create_post, get_post, update_post, delete_post
from ..core import get_store

router = APIRouter()


@router.get('', response_model=List[PostOut])
async def feed(store=Depends(get_store)):
    return await list_posts(store)


@router.post('', response_model=PostCreatedOut, status_code=201)
async def create(payload: PostIn, store=Depends(get_store)):
    post = await create_post(store, payload)
    return {'success': True, 'data': post}


# declared before /{post_id} so "featured" is not read as an id
@router.get('/featured', response_model=PostOut)
async def featured(store=Depends(get_store)):
    return await featured_post(store)


@router.get('/{post_id}', response_model=PostOut)
async def read(post_id: str, store=Depends(get_store)):
    return await get_post(store, post_id)


@router.put('/{post_id}', response_model=PostOut)
async def update(post_id: str, payload: PostIn, store=Depends(get_store)):
    return await update_post(store, post_id, payload)


@router.delete('/{post_id}', response_model=ActionOkOut)
async def delete(post_id: str, store=Depends(get_store)):
    await delete_post(store, post_id)
    return {'ok': True, 'message': 'Post deleted'}
