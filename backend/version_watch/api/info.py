from fastapi import APIRouter

from version_watch.core.config import settings
from version_watch.schemas.info import ServerInfo

router = APIRouter()


def get_info_payload() -> ServerInfo:
    return ServerInfo(version=settings.version)


@router.get('/info', response_model=ServerInfo)
async def info():
    return get_info_payload()
