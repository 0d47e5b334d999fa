"""
Document Routes

Upload a .txt/.pdf/.docx file, store it, return the extracted text.
Humanizing that text is a separate call to /api/humanize.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from supabase import Client

from ..config import Settings, get_settings
from ..logging import get_logger
from ..middleware.auth import get_current_user, get_supabase_client
from ..models.schemas import DocumentInfo, UserContext
from ..services.documents import DocumentError, DocumentService, UnsupportedFileType


logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Documents"])


@router.post("/documents", response_model=DocumentInfo)
async def upload_document(
    file: UploadFile = File(...),
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client),
    settings: Settings = Depends(get_settings)
):
    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large"
        )

    service = DocumentService(supabase, bucket=settings.documents_bucket)
    try:
        return await service.upload_and_extract(user.user_id, file.filename or "", raw)
    except UnsupportedFileType as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=e.message
        )
    except DocumentError as e:
        logger.warning("Document upload failed for %s: %s", user.user_id, e.internal_reason)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
