"""
Document extraction and storage.
"""

import io

import pytest
from docx import Document
from pypdf import PdfWriter

from humanizer.services.documents import (
    DocumentError,
    DocumentService,
    UnsupportedFileType,
    extract_text,
    file_extension,
)

from conftest import AI_TEXT, TEST_USER_ID, MockSupabaseClient


def docx_bytes(*paragraphs):
    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def blank_pdf_bytes():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestExtractText:

    def test_txt(self):
        assert extract_text(AI_TEXT.encode("utf-8"), "txt") == AI_TEXT

    def test_txt_ignores_undecodable_bytes(self):
        assert extract_text(b"caf\xff plain", "txt") == "caf plain"

    def test_docx_skips_empty_paragraphs(self):
        raw = docx_bytes("First paragraph.", "", "Second paragraph.")
        assert extract_text(raw, "docx") == "First paragraph.\nSecond paragraph."

    def test_blank_pdf(self):
        assert extract_text(blank_pdf_bytes(), "pdf").strip() == ""

    @pytest.mark.parametrize("file_type", ["pdf", "docx"])
    def test_corrupt_files(self, file_type):
        with pytest.raises(DocumentError) as exc_info:
            extract_text(b"definitely not a document", file_type)
        assert not isinstance(exc_info.value, UnsupportedFileType)
        assert exc_info.value.internal_reason

    def test_unsupported(self):
        with pytest.raises(UnsupportedFileType):
            extract_text(b"GIF89a", "gif")


@pytest.mark.parametrize("name,ext", [
    ("report.PDF", "pdf"),
    ("archive.tar.docx", "docx"),
    ("README", ""),
])
def test_file_extension(name, ext):
    assert file_extension(name) == ext


class TestDocumentService:

    @pytest.mark.asyncio
    async def test_upload_path_and_url(self):
        supabase = MockSupabaseClient()
        service = DocumentService(supabase, bucket="uploads")

        url = await service.upload(TEST_USER_ID, "essay.txt", b"hello")

        (bucket, path), = supabase.storage.files.keys()
        assert bucket == "uploads"
        assert path.startswith(f"{TEST_USER_ID}/")
        assert path.endswith(".txt")
        assert url == f"https://storage.example.com/uploads/{path}"

    @pytest.mark.asyncio
    async def test_unreadable_file_is_not_stored(self):
        supabase = MockSupabaseClient()
        service = DocumentService(supabase)

        with pytest.raises(DocumentError):
            await service.upload_and_extract(TEST_USER_ID, "broken.pdf", b"junk")

        assert supabase.storage.files == {}

    @pytest.mark.asyncio
    async def test_storage_failure(self):
        supabase = MockSupabaseClient()

        def failing_upload(path, data, file_options=None):
            raise RuntimeError("bucket not found")

        bucket = supabase.storage.from_("documents")
        bucket.upload = failing_upload
        supabase.storage.from_ = lambda name: bucket

        with pytest.raises(DocumentError) as exc_info:
            await DocumentService(supabase).upload(TEST_USER_ID, "notes.txt", b"x")

        assert exc_info.value.message == "Failed to upload document. Please try again."
        assert "bucket not found" in exc_info.value.internal_reason
