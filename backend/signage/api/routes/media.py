from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from signage.api.deps import StorageDep
from signage.core.storage import StorageError

router = APIRouter()


@router.get("/{path:path}")
def read_media(storage: StorageDep, path: str) -> FileResponse:
    """
    Serve a stored ad media object.
    """
    try:
        target = storage.retrieve(path)
    except StorageError:
        raise HTTPException(status_code=404, detail="Media not found")
    return FileResponse(target)
