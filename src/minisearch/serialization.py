"""
Snapshot export/restore for the search index.

A snapshot is a JSON-compatible dictionary holding the full postings index,
the document store and the document counter. Restoring validates the whole
snapshot before any state is built, so a rejected snapshot never yields a
partially populated index.
"""

import gzip
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from .index.inverted_index import InvertedIndex, DocumentStore

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT_VERSION = 1
REQUIRED_FIELDS = ('index', 'documents', 'document_count')


class SnapshotError(ValueError):
    """Raised when a snapshot is missing fields or is malformed."""


def export_snapshot(index: InvertedIndex, doc_store: DocumentStore) -> dict:
    """
    Export the index state.

    Args:
        index: Postings index
        doc_store: Document store

    Returns:
        Snapshot dictionary
    """
    return {
        'format_version': SNAPSHOT_FORMAT_VERSION,
        'index': index.to_dict(),
        'documents': doc_store.to_dict(),
        'document_count': doc_store.get_document_count()
    }


def restore_snapshot(snapshot: Any) -> Tuple[InvertedIndex, DocumentStore]:
    """
    Validate a snapshot and build fresh index state from it.

    Args:
        snapshot: Snapshot dictionary, as produced by export_snapshot

    Returns:
        Tuple of (InvertedIndex, DocumentStore)

    Raises:
        SnapshotError: If a required field is missing or malformed
    """
    if not isinstance(snapshot, Mapping):
        raise SnapshotError("snapshot must be a mapping")

    missing = [name for name in REQUIRED_FIELDS if name not in snapshot]
    if missing:
        raise SnapshotError(f"missing required field(s): {', '.join(missing)}")

    version = snapshot.get('format_version', SNAPSHOT_FORMAT_VERSION)
    if version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotError(f"unsupported format_version: {version!r}")

    document_count = snapshot['document_count']
    if not _is_int(document_count) or document_count < 0:
        raise SnapshotError("document_count must be a non-negative integer")

    documents = _validate_documents(snapshot['documents'], document_count)
    _validate_index(snapshot['index'], set(documents))

    index = InvertedIndex.from_dict(snapshot['index'])
    doc_store = DocumentStore.from_dict(snapshot['documents'], document_count)
    return index, doc_store


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_doc_id(key: Any, section: str) -> int:
    if _is_int(key):
        doc_id = key
    elif isinstance(key, str) and key.isascii() and key.isdigit():
        doc_id = int(key)
    else:
        raise SnapshotError(f"{section}: invalid document id {key!r}")
    if doc_id < 1:
        raise SnapshotError(f"{section}: invalid document id {key!r}")
    return doc_id


def _validate_documents(documents: Any, document_count: int) -> dict:
    """Check the documents section, returning it keyed by integer id."""
    if not isinstance(documents, Mapping):
        raise SnapshotError("documents must be a mapping")

    validated = {}
    for key, doc in documents.items():
        doc_id = _parse_doc_id(key, 'documents')
        if doc_id in validated:
            raise SnapshotError(f"documents: duplicate document id {key!r}")
        if not isinstance(doc, Mapping):
            raise SnapshotError(f"documents[{key}] must be a mapping")
        if 'id' in doc and _parse_doc_id(doc['id'], f"documents[{key}].id") != doc_id:
            raise SnapshotError(f"documents[{key}] has mismatched id {doc['id']!r}")
        for name in ('title', 'content'):
            if not isinstance(doc.get(name), str):
                raise SnapshotError(f"documents[{key}].{name} must be a string")
        length = doc.get('length')
        if not _is_int(length) or length < 0:
            raise SnapshotError(f"documents[{key}].length must be a non-negative integer")
        validated[doc_id] = doc

    # ids are assigned 1..document_count with no gaps
    if set(validated) != set(range(1, document_count + 1)):
        raise SnapshotError(
            f"document_count {document_count} does not match stored document ids "
            f"{sorted(validated)}"
        )

    return validated


def _validate_index(index: Any, doc_ids: set):
    """Check the postings section against the known document ids."""
    if not isinstance(index, Mapping):
        raise SnapshotError("index must be a mapping")

    for term, postings in index.items():
        if not isinstance(term, str):
            raise SnapshotError(f"index term {term!r} must be a string")
        if not isinstance(postings, Mapping):
            raise SnapshotError(f"index[{term}] must be a mapping")

        seen = set()
        for key, posting in postings.items():
            doc_id = _parse_doc_id(key, f"index[{term}]")
            if doc_id in seen:
                raise SnapshotError(f"index[{term}]: duplicate document id {key!r}")
            seen.add(doc_id)
            if doc_id not in doc_ids:
                raise SnapshotError(f"index[{term}] references unknown document {doc_id}")
            if not isinstance(posting, Mapping):
                raise SnapshotError(f"index[{term}][{key}] must be a mapping")

            frequency = posting.get('frequency')
            positions = posting.get('positions')
            if not _is_int(frequency) or frequency < 1:
                raise SnapshotError(f"index[{term}][{key}].frequency must be a positive integer")
            if not isinstance(positions, list) or not all(_is_int(p) for p in positions):
                raise SnapshotError(f"index[{term}][{key}].positions must be a list of integers")
            if len(positions) != frequency:
                raise SnapshotError(f"index[{term}][{key}] positions do not match frequency")
            if positions and positions[0] < 0:
                raise SnapshotError(f"index[{term}][{key}] has a negative position")
            if any(a >= b for a, b in zip(positions, positions[1:])):
                raise SnapshotError(f"index[{term}][{key}] positions are not strictly increasing")


def snapshot_from_json(data: str) -> dict:
    """
    Decode a snapshot from a JSON string.

    Raises:
        SnapshotError: If the text is not valid JSON
    """
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid snapshot JSON: {e}") from e


def save_snapshot(snapshot: dict, file_path: Union[str, Path]) -> Path:
    """
    Write a snapshot to disk. Paths ending in .gz are gzip compressed.

    Returns:
        Path written
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    if file_path.suffix == '.gz':
        with gzip.open(file_path, 'wt', encoding='utf-8') as f:
            json.dump(snapshot, f)
    else:
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(snapshot, f)

    logger.info(f"Snapshot saved to {file_path}")
    return file_path


def load_snapshot(file_path: Union[str, Path]) -> dict:
    """
    Read a snapshot from disk.

    Raises:
        FileNotFoundError: If the file does not exist
        SnapshotError: If the file is not valid JSON
    """
    file_path = Path(file_path)

    if not file_path.exists():
        logger.error(f"Snapshot not found at {file_path}")
        raise FileNotFoundError(f"Snapshot not found at {file_path}")

    if file_path.suffix == '.gz':
        with gzip.open(file_path, 'rt', encoding='utf-8') as f:
            text = f.read()
    else:
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()

    return snapshot_from_json(text)
