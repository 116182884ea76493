"""
Document Parser - Extract plain text from uploaded documents
"""

from __future__ import annotations

import io
import mimetypes

import docx
import fitz

from services.errors import ExtractionError

TEXT_MEDIA_TYPE = "text/plain"
PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_MEDIA_TYPES = (TEXT_MEDIA_TYPE, PDF_MEDIA_TYPE, DOCX_MEDIA_TYPE)

_EXTENSION_TYPES = {
    ".txt": TEXT_MEDIA_TYPE,
    ".pdf": PDF_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
}


def resolve_media_type(media_type: str | None, file_name: str | None = None) -> str:
    """Normalize a declared media type, guessing from the file name when it is generic"""
    declared = (media_type or "").split(";", 1)[0].strip().lower()
    if declared in SUPPORTED_MEDIA_TYPES:
        return declared

    if file_name:
        lowered = file_name.lower()
        for extension, guessed in _EXTENSION_TYPES.items():
            if lowered.endswith(extension):
                return guessed
        guessed, _ = mimetypes.guess_type(file_name)
        if guessed:
            return guessed

    return declared or "application/octet-stream"


def _extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ExtractionError(f"Text file is not valid UTF-8: {e}") from e


def _extract_pdf(data: bytes) -> str:
    """Concatenate page texts, each page followed by a blank line"""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text("text") for page in doc]
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Failed to read PDF: {e}") from e

    text = ""
    for page_text in pages:
        text += " ".join(page_text.split()) + "\n\n"
    return text


def _extract_docx(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        # python-docx surfaces zip/xml errors from several libraries
        raise ExtractionError(f"Failed to read DOCX: {e}") from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(data: bytes, media_type: str) -> str:
    """Extract plain text from raw bytes of a supported media type"""
    if media_type == TEXT_MEDIA_TYPE:
        return _extract_plain_text(data)
    if media_type == PDF_MEDIA_TYPE:
        return _extract_pdf(data)
    if media_type == DOCX_MEDIA_TYPE:
        return _extract_docx(data)
    raise ExtractionError(
        "Unsupported file type. Please upload .txt, .pdf, or .docx",
        unsupported=True,
    )
