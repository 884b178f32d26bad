from __future__ import annotations

import logging
from io import BytesIO
from zipfile import BadZipFile, ZipFile

from docx import Document
from pypdf import PdfReader

from .models import ParsedDoc

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "docx")

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def file_extension(filename: str | None) -> str:
    name = (filename or "").strip()
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def is_supported_resume_file(filename: str | None) -> bool:
    return file_extension(filename) in SUPPORTED_EXTENSIONS


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = file_extension(filename)
    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if ext == "docx":
        if not any(content.startswith(magic) for magic in ZIP_MAGICS) or not _zip_has_paths(content, ("word/",)):
            raise ValueError("File signature does not match .docx content.")
        return

    raise ValueError(f"Unsupported file type '.{ext}'. Supported types: .pdf, .docx")


def _parse_pdf(filename: str, content: bytes) -> ParsedDoc:
    warnings: list[str] = []
    try:
        reader = PdfReader(BytesIO(content))
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
    except Exception as exc:
        raise ValueError("Unable to extract text from this PDF file.") from exc

    if not page_chunks:
        warnings.append("No extractable text found in PDF.")
    text = "\n".join(page_chunks)
    logger.info("pdf_extracted chars=%s pages=%s", len(text), len(reader.pages))
    return ParsedDoc(
        filename=filename,
        source_type="pdf",
        text=text,
        page_count=len(reader.pages),
        parsing_warnings=warnings,
    )


def _parse_docx(filename: str, content: bytes) -> ParsedDoc:
    warnings: list[str] = []
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise ValueError("Unable to extract text from this Word document.") from exc

    paragraphs = [p.text for p in document.paragraphs]
    if not any(p.strip() for p in paragraphs):
        warnings.append("No extractable text found in DOCX.")
    text = "".join(f"{p}\n" for p in paragraphs)
    logger.info("docx_extracted chars=%s paragraphs=%s", len(text), len(paragraphs))
    return ParsedDoc(
        filename=filename,
        source_type="docx",
        text=text,
        paragraph_count=len(paragraphs),
        parsing_warnings=warnings,
    )


def extract_resume_text(filename: str, content: bytes) -> ParsedDoc:
    """Extract plain text from an uploaded PDF or DOCX resume.

    Raises ValueError with a user-facing message when the file type is not
    supported, the content does not match its extension, or the parser fails.
    An empty result is returned as a ParsedDoc with ``is_empty`` set; callers
    decide whether that is acceptable.
    """
    validate_upload_signature(filename=filename, content=content)
    if file_extension(filename) == "pdf":
        return _parse_pdf(filename, content)
    return _parse_docx(filename, content)
