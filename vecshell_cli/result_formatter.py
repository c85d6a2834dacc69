import json
from typing import Any, List, Optional

from vecshell_data_model.data_models import GetResponse

NULL_MARKER = "<null>"
DOCUMENT_PREVIEW_LENGTH = 64


def format_tenant(tenant) -> str:
    return tenant.name


def format_database(database) -> str:
    return database.name


def format_collection(collection, count: Optional[int] = None) -> str:
    """``<id> <name>``, followed by ``<count>`` when one is given."""
    fields = [collection.id, collection.name]
    if count is not None:
        fields.append(str(count))
    return " ".join(fields)


def truncate_document(document: str) -> str:
    """Cut a document to its first 64 characters and append ``...`` if it is longer."""
    if len(document) > DOCUMENT_PREVIEW_LENGTH:
        return f"{document[:DOCUMENT_PREVIEW_LENGTH]}..."
    return document


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def format_metadata(metadata: Optional[dict]) -> str:
    if metadata is None:
        return NULL_MARKER
    return _encode(metadata)


def format_document(document: Optional[str]) -> str:
    """Missing documents print as the JSON-encoded null marker, unlike metadata."""
    if document is None:
        return _encode(NULL_MARKER)
    return _encode(truncate_document(document))


def format_records(response: GetResponse) -> List[str]:
    """
    Render one ``<id> <metadata> <document>`` line per record, in response order.

    Entries missing from ``documents`` or ``metadatas`` (including a missing
    sequence altogether) render as the null marker, bare in the metadata
    column and JSON-encoded (``"<null>"``) in the document column.
    """
    lines = []
    for i, record_id in enumerate(response.ids):
        metadata = response.metadatas[i] if response.metadatas is not None else None
        document = response.documents[i] if response.documents is not None else None
        lines.append(f"{record_id} {format_metadata(metadata)} {format_document(document)}")
    return lines
