"""
Documents: upload to storage and extract plain text.

Extraction is upstream of humanization. Extracted text goes through the
orchestrator exactly like typed text, including the 50-character gate.
"""

import io
import uuid

from docx import Document
from pypdf import PdfReader
from supabase import Client

from ..logging import get_logger
from ..models.schemas import DocumentInfo


logger = get_logger(__name__)

ALLOWED_EXTENSIONS = ("txt", "pdf", "docx")

CONTENT_TYPES = {
    "txt": "text/plain",
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class DocumentError(Exception):
    """User-facing upload/extraction failure."""
    def __init__(self, message: str, internal_reason: str = ""):
        self.message = message
        self.internal_reason = internal_reason
        super().__init__(message)


class UnsupportedFileType(DocumentError):
    pass


def file_extension(file_name: str) -> str:
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def extract_text(raw: bytes, file_type: str) -> str:
    """Plain text from a .txt, .pdf or .docx payload."""
    if file_type == "txt":
        return raw.decode("utf-8", errors="ignore")

    if file_type == "pdf":
        try:
            reader = PdfReader(io.BytesIO(raw))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise DocumentError(
                "Could not read the PDF file.",
                internal_reason=f"{type(e).__name__}: {e}"
            )
        return "\n".join(pages)

    if file_type == "docx":
        try:
            doc = Document(io.BytesIO(raw))
        except Exception as e:
            raise DocumentError(
                "Could not read the Word document.",
                internal_reason=f"{type(e).__name__}: {e}"
            )
        return "\n".join(p.text for p in doc.paragraphs if p.text.strip())

    raise UnsupportedFileType("Only .txt, .docx, and .pdf files are supported.")


class DocumentService:
    """Uploads user documents to the storage bucket."""

    def __init__(self, supabase: Client, bucket: str = "documents"):
        self.supabase = supabase
        self.bucket = bucket

    async def upload(self, user_id: uuid.UUID, file_name: str, raw: bytes) -> str:
        """Store the file under <user_id>/<random>.<ext> and return its public URL."""
        ext = file_extension(file_name)
        if ext not in ALLOWED_EXTENSIONS:
            raise UnsupportedFileType("Only .txt, .docx, and .pdf files are supported.")

        path = f"{user_id}/{uuid.uuid4().hex}.{ext}"
        storage = self.supabase.storage.from_(self.bucket)
        try:
            storage.upload(path, raw, {
                "content-type": CONTENT_TYPES[ext],
                "cache-control": "3600",
                "upsert": "false",
            })
        except Exception as e:
            raise DocumentError(
                "Failed to upload document. Please try again.",
                internal_reason=f"storage upload {path}: {type(e).__name__}: {e}"
            )

        return storage.get_public_url(path)

    async def upload_and_extract(
        self, user_id: uuid.UUID, file_name: str, raw: bytes
    ) -> DocumentInfo:
        ext = file_extension(file_name)
        if ext not in ALLOWED_EXTENSIONS:
            raise UnsupportedFileType("Only .txt, .docx, and .pdf files are supported.")

        # Extract first: no point storing a file we cannot read
        text = extract_text(raw, ext)
        url = await self.upload(user_id, file_name, raw)
        logger.info("Stored document for %s (%s, %d chars)", user_id, ext, len(text))

        return DocumentInfo(
            file_name=file_name,
            file_url=url,
            file_type=ext,
            extracted_text=text
        )
