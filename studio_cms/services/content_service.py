"""
CRUD operations over content documents.

Every mutation validates before it persists: item payloads against the item
schema, then the whole resulting document against the document schema. Item
mutations run under the document's lock so concurrent requests in this
process cannot interleave their read-modify-write cycles.
"""

from typing import Any, Dict, List, Tuple

from studio_cms.services.document_store import ContentRepository
from studio_cms.services.resources import ResourceDefinition, get_resource
from studio_cms.services.validator import validate_payload
from studio_cms.utils.exceptions import DocumentNotFoundError, NotFoundError, ValidationError
from studio_cms.utils.logger import get_logger
from studio_cms.utils.timestamps import utc_now_iso

logger = get_logger(__name__)


def next_id(items: List[Dict[str, Any]]) -> int:
    """One past the largest integer id in the collection"""
    ids = [item["id"] for item in items if isinstance(item.get("id"), int)]
    return max(ids, default=0) + 1


def next_order(items: List[Dict[str, Any]]) -> int:
    orders = [item["order"] for item in items if isinstance(item.get("order"), int)]
    return max(orders, default=0) + 1


def assign_missing_ids(collection: str, items: List[Dict[str, Any]]) -> None:
    """
    Give id-less items the next free id, in document order.

    Raises:
        ValidationError: Two items share an id
    """
    seen = set()
    duplicates = []
    for index, item in enumerate(items):
        item_id = item.get("id")
        if item_id is None:
            continue
        if item_id in seen:
            duplicates.append({"field": f"{collection}.{index}.id", "message": "Duplicate id", "value": item_id})
        seen.add(item_id)
    if duplicates:
        raise ValidationError("Validation failed", details=duplicates)

    for item in items:
        if item.get("id") is None:
            item["id"] = next_id(items)


class ContentService:
    """Document- and item-level operations for every registered resource kind"""

    def __init__(self, repository: ContentRepository):
        self.repository = repository

    def get_document(self, kind: str) -> Dict[str, Any]:
        """Return the stored document, or the kind's default shape if none exists yet"""
        resource = get_resource(kind)
        try:
            return self.repository.get(kind)
        except DocumentNotFoundError:
            return resource.default_document()

    def replace_document(self, kind: str, payload: Any) -> Dict[str, Any]:
        """Validate and store a whole document, stamping ``updatedAt``"""
        resource = get_resource(kind)
        document = validate_payload(resource.schema, payload)
        if resource.has_collection:
            assign_missing_ids(resource.collection, document.get(resource.collection) or [])
        document["updatedAt"] = utc_now_iso()
        with self.repository.lock(kind):
            self.repository.put(kind, document)
        logger.info("Document replaced", resource=kind)
        return document

    def add_item(self, kind: str, payload: Any) -> Dict[str, Any]:
        """Append a new item to the kind's collection and return it"""
        resource = self._collection_resource(kind)
        item = validate_payload(resource.item_schema, payload)
        order_given = isinstance(payload, dict) and payload.get("order") is not None

        with self.repository.lock(kind):
            document, items = self._load_collection(resource)
            item["id"] = next_id(items)
            if not order_given:
                item["order"] = next_order(items)
            items.append(item)
            self._save(resource, document)

        logger.info("Item added", resource=kind, item_id=item["id"])
        return item

    def update_item(self, kind: str, item_id: int, payload: Any) -> Dict[str, Any]:
        """Replace one item in full; its id is kept"""
        resource = self._collection_resource(kind)
        item = validate_payload(resource.item_schema, payload)

        with self.repository.lock(kind):
            document, items = self._load_collection(resource)
            index = self._find_index(resource, items, item_id)
            item["id"] = item_id
            items[index] = item
            self._save(resource, document)

        logger.info("Item updated", resource=kind, item_id=item_id)
        return item

    def delete_item(self, kind: str, item_id: int) -> Dict[str, Any]:
        """Remove one item and return it; nothing is written when it is missing"""
        resource = self._collection_resource(kind)

        with self.repository.lock(kind):
            document, items = self._load_collection(resource)
            index = self._find_index(resource, items, item_id)
            removed = items.pop(index)
            self._save(resource, document)

        logger.info("Item deleted", resource=kind, item_id=item_id)
        return removed

    def _collection_resource(self, kind: str) -> ResourceDefinition:
        resource = get_resource(kind)
        if not resource.has_collection:
            raise NotFoundError(f"{resource.label} has no item collection")
        return resource

    def _load_collection(self, resource: ResourceDefinition) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        try:
            document = self.repository.get(resource.kind)
        except DocumentNotFoundError:
            raise NotFoundError(f"{resource.label} data not found")
        if not isinstance(document, dict):
            raise NotFoundError(f"{resource.label} data not found")

        items = document.get(resource.collection)
        if items is None:
            items = document[resource.collection] = []
        if not isinstance(items, list):
            raise ValidationError(
                "Validation failed",
                details=[{"field": resource.collection, "message": "must be an array"}],
            )
        return document, items

    def _find_index(self, resource: ResourceDefinition, items: List[Dict[str, Any]], item_id: int) -> int:
        for index, item in enumerate(items):
            if isinstance(item, dict) and item.get("id") == item_id:
                return index
        raise NotFoundError(f"{resource.item_label} {item_id} not found")

    def _save(self, resource: ResourceDefinition, document: Dict[str, Any]) -> None:
        validated = validate_payload(resource.schema, document)
        validated["updatedAt"] = utc_now_iso()
        self.repository.put(resource.kind, validated)
