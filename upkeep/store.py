"""YAML-backed document store with per-user namespaced collections."""

import copy
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .errors import PersistenceError

logger = logging.getLogger(__name__)

Fields = Dict[str, Any]


@dataclass
class Document:
    """A stored document: its id within the collection and its fields."""

    id: str
    fields: Fields


# =============================================================================
# Paths
# =============================================================================


def user_path(uid: str) -> str:
    return f"users/{uid}"


def vehicles_path(uid: str) -> str:
    return f"{user_path(uid)}/vehicles"


def vehicle_path(uid: str, vehicle_id: str) -> str:
    return f"{vehicles_path(uid)}/{vehicle_id}"


def services_path(uid: str, vehicle_id: str) -> str:
    return f"{vehicle_path(uid, vehicle_id)}/services"


def reminders_path(uid: str) -> str:
    return f"{user_path(uid)}/reminders"


def history_path(uid: str, vehicle_id: Optional[str] = None) -> str:
    """User-level history, or a vehicle's history when vehicle_id is given."""
    if vehicle_id is not None:
        return f"{vehicle_path(uid, vehicle_id)}/history"
    return f"{user_path(uid)}/history"


def settings_path(uid: str) -> str:
    return f"{user_path(uid)}/profile/settings"


def split_document_path(document_path: str) -> Tuple[str, str]:
    """Split 'a/b/c/id' into ('a/b/c', 'id')."""
    collection, _, doc_id = document_path.rpartition("/")
    if not collection or not doc_id:
        raise PersistenceError(f"Invalid document path: {document_path!r}")
    return collection, doc_id


def new_document_id() -> str:
    return uuid.uuid4().hex[:12]


# =============================================================================
# Store
# =============================================================================


class DocumentStore:
    """
    Document store persisted to a single YAML file.

    The file maps each collection path to a mapping of document id to
    fields. Every operation loads the raw YAML, applies the change, and
    writes the file back before returning.
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    def _load(self) -> Dict[str, Dict[str, Fields]]:
        if not self.filename.exists():
            return {}
        try:
            with open(self.filename, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Failed to read {self.filename}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.filename} is not a document store")
        return data

    def _save(self, data: Dict[str, Dict[str, Fields]]) -> None:
        try:
            self.filename.parent.mkdir(parents=True, exist_ok=True)
            with open(self.filename, "w") as fp:
                yaml.safe_dump(
                    data,
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Failed to write {self.filename}: {e}") from e

    def create(self, collection_path: str, fields: Fields) -> str:
        """Add a document to a collection and return its new id."""
        data = self._load()
        collection = data.setdefault(collection_path, {})
        doc_id = new_document_id()
        while doc_id in collection:
            doc_id = new_document_id()
        collection[doc_id] = dict(fields)
        self._save(data)
        logger.debug("Created %s/%s", collection_path, doc_id)
        return doc_id

    def set(self, document_path: str, fields: Fields) -> None:
        """Create or replace a document at a known path."""
        collection_path, doc_id = split_document_path(document_path)
        data = self._load()
        data.setdefault(collection_path, {})[doc_id] = dict(fields)
        self._save(data)

    def update(self, document_path: str, partial_fields: Fields) -> None:
        """Merge fields into an existing document."""
        collection_path, doc_id = split_document_path(document_path)
        data = self._load()
        collection = data.get(collection_path) or {}
        if doc_id not in collection:
            raise PersistenceError(f"No document at {document_path}")
        collection[doc_id].update(partial_fields)
        self._save(data)

    def get(self, document_path: str) -> Optional[Fields]:
        """Return a copy of a document's fields, or None if it does not exist."""
        collection_path, doc_id = split_document_path(document_path)
        collection = self._load().get(collection_path) or {}
        fields = collection.get(doc_id)
        return copy.deepcopy(fields) if fields is not None else None

    def query(
        self,
        collection_path: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Document]:
        """
        List every document in a collection.

        Documents missing the order_by field sort last regardless of
        direction.
        """
        collection = self._load().get(collection_path) or {}
        docs = [
            Document(id=doc_id, fields=copy.deepcopy(fields))
            for doc_id, fields in collection.items()
        ]
        if order_by is None:
            return docs
        present = [d for d in docs if d.fields.get(order_by) is not None]
        missing = [d for d in docs if d.fields.get(order_by) is None]
        present.sort(key=lambda d: d.fields[order_by], reverse=descending)
        return present + missing

    def delete(self, document_path: str) -> None:
        """Remove a document. Deleting a missing document is a no-op."""
        collection_path, doc_id = split_document_path(document_path)
        data = self._load()
        collection = data.get(collection_path) or {}
        if doc_id not in collection:
            return
        del collection[doc_id]
        if not collection:
            del data[collection_path]
        self._save(data)
        logger.debug("Deleted %s", document_path)
