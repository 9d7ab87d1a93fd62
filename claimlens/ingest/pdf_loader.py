from __future__ import annotations
from typing import Callable, Iterable, Iterator, List, Protocol
import io
import os
from pypdf import PdfReader
from claimlens.utils.types import SourceDocument, PLAIN_TEXT, PAGED_BINARY, MEDIA_KINDS
from claimlens.utils.exceptions import UnsupportedMediaKind, UnreadableDocument, InvalidRequest
from claimlens.utils.logger import logger

# utf-8-sig drops a leading byte-order mark
TEXT_ENCODING = "utf-8-sig"
PAGE_SEPARATOR = "\n\n"

MIME_TO_KIND = {
    "text/plain": PLAIN_TEXT,
    "application/pdf": PAGED_BINARY,
}
EXTENSION_TO_KIND = {
    ".txt": PLAIN_TEXT,
    ".pdf": PAGED_BINARY,
}


class Page(Protocol):
    def extract_text(self) -> str: ...


PageOpener = Callable[[bytes], Iterable[Page]]


class PypdfPage:
    """One PDF page whose text runs are joined with single spaces."""

    def __init__(self, page):
        self._page = page

    def extract_text(self) -> str:
        runs: List[str] = []

        def visit(text, cm, tm, font_dict, font_size):
            if text and text.strip():
                runs.append(text.strip())

        self._page.extract_text(visitor_text=visit)
        return " ".join(runs)


def open_pdf(data: bytes) -> Iterator[PypdfPage]:
    """Open PDF bytes with pypdf and yield pages lazily, first to last."""
    reader = PdfReader(io.BytesIO(data))
    if reader.is_encrypted:
        raise UnreadableDocument("Document is password-protected")
    for page in reader.pages:
        yield PypdfPage(page)


def resolve_media_kind(declared_type: str | None, filename: str = "") -> str:
    """Map an upload's declared MIME type to a media kind.

    The extension is consulted only when no type was declared at all.
    """
    if declared_type:
        kind = MIME_TO_KIND.get(declared_type.split(";")[0].strip().lower())
    else:
        kind = EXTENSION_TO_KIND.get(os.path.splitext(filename)[1].lower())
    if kind is None:
        raise UnsupportedMediaKind(
            "Please upload a valid .txt or .pdf file.",
            {"declared_type": declared_type, "filename": filename},
        )
    return kind


def source_from_upload(uploaded_file, max_upload_mb: int = 20) -> SourceDocument:
    """Build a SourceDocument from a Streamlit UploadedFile (or anything with name/type/read)."""
    name = getattr(uploaded_file, "name", "") or ""
    kind = resolve_media_kind(getattr(uploaded_file, "type", None), name)
    data = uploaded_file.read()
    if len(data) > max_upload_mb * 1024 * 1024:
        raise InvalidRequest(
            f"File {name} exceeds the {max_upload_mb} MB upload limit",
            {"size": len(data)},
        )
    return SourceDocument(data=data, media_kind=kind, name=name)


def iter_page_texts(pages: Iterable[Page]) -> Iterator[str]:
    for page in pages:
        yield page.extract_text() or ""


def extract_text(source: SourceDocument, open_document: PageOpener = open_pdf) -> str:
    """Return the plain text of a document.

    Plain text is decoded verbatim. PDFs are read page by page in physical
    order and joined with a blank line; the result is stripped. Any parser
    failure surfaces as UnreadableDocument, never as a partial string.
    """
    if source.media_kind not in MEDIA_KINDS:
        raise UnsupportedMediaKind(f"Unsupported media kind: {source.media_kind}")

    if source.media_kind == PLAIN_TEXT:
        try:
            return source.data.decode(TEXT_ENCODING)
        except UnicodeDecodeError as exc:
            raise UnreadableDocument(f"Failed to decode {source.name or 'document'} as {TEXT_ENCODING}") from exc

    try:
        page_texts = list(iter_page_texts(open_document(source.data)))
    except UnreadableDocument:
        raise
    except Exception as exc:
        raise UnreadableDocument(
            f"Failed to process file: {source.name or 'document'}. It might be corrupted or password-protected.",
            {"cause": type(exc).__name__},
        ) from exc
    text = PAGE_SEPARATOR.join(page_texts)
    logger.debug("Extracted %d pages (%d chars) from %s", len(page_texts), len(text), source.name or "<pdf>")
    return text.strip()
