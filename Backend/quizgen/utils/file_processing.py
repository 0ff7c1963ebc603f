import base64
import binascii
import io
import logging
from typing import Union

import fitz  # PyMuPDF
from pypdf import PdfReader

from quizgen.errors import ExtractionFailed
from quizgen.schemas import ExtractedPage, ExtractedText

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def decode_payload(payload: Union[bytes, str]) -> bytes:
    """Turn a data URI, a bare base64 string or raw PDF bytes into bytes"""
    if isinstance(payload, (bytes, bytearray)):
        if bytes(payload[:4]) == PDF_MAGIC:
            return bytes(payload)
        try:
            payload = bytes(payload).decode("ascii")
        except UnicodeDecodeError as e:
            raise ExtractionFailed("Payload is neither PDF bytes nor base64 text") from e

    if not payload or not payload.strip():
        raise ExtractionFailed("Empty document payload")

    # data:application/pdf;base64,JVBERi0...
    encoded = payload.split(",", 1)[1] if "," in payload else payload
    try:
        return base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExtractionFailed(f"Payload is not valid base64: {str(e)}") from e


def _pages_with_pymupdf(data: bytes) -> list[ExtractedPage]:
    pages = []
    with fitz.open(stream=data, filetype="pdf") as doc:
        for index, page in enumerate(doc):
            fragments = []
            # blocks: (x0, y0, x1, y1, text, block_no, block_type), type 0 is text
            for block in page.get_text("blocks", sort=True):
                if block[6] != 0:
                    continue
                fragments.extend(line.strip() for line in block[4].splitlines() if line.strip())
            pages.append(ExtractedPage(number=index + 1, fragments=tuple(fragments)))
    return pages


def _pages_with_pypdf(data: bytes) -> list[ExtractedPage]:
    reader = PdfReader(io.BytesIO(data))
    pages = []
    for index, page in enumerate(reader.pages):
        text = page.extract_text() or ""
        fragments = tuple(line.strip() for line in text.splitlines() if line.strip())
        pages.append(ExtractedPage(number=index + 1, fragments=fragments))
    return pages


def extract_text(payload: Union[bytes, str]) -> ExtractedText:
    """Extract per-page text fragments from an encoded PDF payload.

    PyMuPDF is tried first and pypdf second. Raises ExtractionFailed when the
    payload does not decode or neither parser can open it as a document with
    at least one page.
    """
    data = decode_payload(payload)
    if data[:4] != PDF_MAGIC:
        raise ExtractionFailed("Decoded payload is not a PDF document")

    try:
        logger.info("Trying PyMuPDF...")
        pages = _pages_with_pymupdf(data)
    except Exception as e:
        logger.error(f"PyMuPDF failed: {str(e)}. Trying pypdf...")
        try:
            pages = _pages_with_pypdf(data)
        except Exception as fallback_e:
            logger.error(f"pypdf failed: {str(fallback_e)}")
            raise ExtractionFailed(f"PDF parsing failed: {str(fallback_e)}") from fallback_e

    if not pages:
        raise ExtractionFailed("PDF declares no pages")

    extracted = ExtractedText(pages=tuple(pages))
    logger.info(f"Extracted {len(extracted.text)} characters from {extracted.page_count} pages")
    return extracted
