"""
File Upload Utility - validate resume uploads and extract their text.

Only PDF is accepted. Text extraction uses PyPDF2.
"""

import io
from PyPDF2 import PdfReader

from jobtracker.core.errors import UnreadablePdf, ValidationError

PDF_CONTENT_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"


def looks_like_pdf(content: bytes) -> bool:
    # Some writers put junk before the header; the format allows 1024 bytes of it
    return PDF_MAGIC in content[:1024]


async def read_upload(file, max_bytes: int) -> bytes:
    """
    Read at most max_bytes + 1 bytes of an upload.

    One byte past the ceiling is enough for validate_pdf_upload to reject
    the file; the rest of the body is never loaded.
    """
    return await file.read(max_bytes + 1)


def validate_pdf_upload(filename: str, content_type: str, content: bytes, max_bytes: int) -> None:
    """
    Reject anything that is not a PDF within the size ceiling.

    Raises:
        ValidationError describing the first failed check
    """
    if not filename:
        raise ValidationError("No filename provided")

    if content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Only PDF files are allowed")

    if not content:
        raise ValidationError("Uploaded file is empty")

    if len(content) > max_bytes:
        raise ValidationError(f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB")

    if not looks_like_pdf(content):
        raise ValidationError("Only PDF files are allowed")


def extract_text_from_pdf(content: bytes) -> str:
    """
    Extract text from PDF bytes.

    Raises:
        UnreadablePdf if the bytes are not a PDF, are encrypted or corrupt,
        or contain no extractable text (e.g. scanned images).
    """
    if not looks_like_pdf(content):
        raise UnreadablePdf("File is not a PDF")

    try:
        reader = PdfReader(io.BytesIO(content))
    except Exception as e:
        raise UnreadablePdf(f"Error reading PDF: {e}") from e

    if reader.is_encrypted:
        raise UnreadablePdf("PDF is encrypted")

    try:
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    except Exception as e:
        raise UnreadablePdf(f"Error reading PDF: {e}") from e

    text = '\n'.join(text_parts)
    if not text.strip():
        raise UnreadablePdf("Could not extract text from PDF. File may be empty or scanned.")
    return text
