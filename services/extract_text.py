from typing import BinaryIO, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from models import Article
from services.logging import get_logger

logger = get_logger(__name__)


def from_pdf(source: Union[str, BinaryIO], fallback_title: str = "") -> Article:
    """Article body from a PDF; unreadable files give an empty text rather than an error."""
    try:
        reader = PdfReader(source)
        text = "\n".join((page.extract_text() or "") for page in reader.pages)
        meta_title = reader.metadata.title if reader.metadata else None
    except (PdfReadError, OSError, ValueError) as e:
        logger.warning("pdf_read_failed", error=str(e))
        return Article(title=fallback_title, text="")
    title = (meta_title or "").strip() or fallback_title
    if not title:
        first_line = next((l.strip() for l in text.splitlines() if l.strip()), "")
        title = first_line[:120]
    return Article(title=title, text=text)
