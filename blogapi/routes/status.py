from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
import logging
from ..core import get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get('')
async def db_status(store=Depends(get_store)):
    try:
        await store.ping()
    except PyMongoError as e:
        logger.warning(f'Database status check failed: {e}')
        return JSONResponse(
            {'status': 'error', 'message': 'Database connection failed', 'error': str(e)},
            status_code=500,
        )
    return {'status': 'connected', 'message': 'Database connection successful'}
