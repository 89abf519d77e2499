from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from portal.config import settings
from portal.core.errors import error_response
from portal.realtime.context import RealtimeContext, get_realtime


router = APIRouter(tags=['Site'])

LOGIN_PAGE = 'login.html'


def static_root() -> Path | None:
    raw = (settings.static_dir or '').strip()
    if not raw:
        return None
    path = Path(raw).resolve()
    return path if path.is_dir() else None


@router.get('/', include_in_schema=False)
def index():
    root = static_root()
    login_page = root / LOGIN_PAGE if root else None
    if not login_page or not login_page.is_file():
        return error_response(404, 'Frontend not configured')
    return FileResponse(login_page)


@router.get('/health')
def health(realtime: RealtimeContext = Depends(get_realtime)) -> dict:
    return {'status': 'ok', 'realtime_connections': len(realtime.registry)}
