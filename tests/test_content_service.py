from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from studio_cms.services.content_service import ContentService
from studio_cms.services.document_store import ContentRepository, DocumentStore
from studio_cms.utils.exceptions import NotFoundError, ValidationError

from conftest import SAMPLE_FAQ, SAMPLE_WORK, read_document, write_document


@pytest.fixture
def service(tmp_path: Path) -> ContentService:
    return ContentService(ContentRepository(DocumentStore(tmp_path)))


def test_default_shape_when_document_absent(service):
    assert service.get_document("faq") == {"items": []}
    assert service.get_document("work") == {"banner": {}, "projects": []}
    assert service.get_document("hero") == {}


def test_unknown_kind(service):
    with pytest.raises(NotFoundError):
        service.get_document("pricing")


def test_add_item_assigns_next_id_and_order(service, tmp_path: Path):
    write_document(tmp_path, "work", SAMPLE_WORK)

    item = service.add_item("work", {
        "title": "Gala",
        "client": "Museum",
        "category": "LIVE",
        "year": 2024,
        "image": "/images/work/gala.jpg",
    })

    assert item["id"] == 3
    assert item["order"] == 3
    stored = read_document(tmp_path, "work")
    assert [p["id"] for p in stored["projects"]] == [1, 2, 3]
    assert "updatedAt" in stored


def test_add_item_keeps_explicit_order(service, tmp_path: Path):
    write_document(tmp_path, "faq", SAMPLE_FAQ)

    item = service.add_item("faq", {"question": "Q?", "answer": "A.", "order": 0})
    assert item["order"] == 0
    assert item["id"] == 2


def test_add_item_requires_existing_document(service, tmp_path: Path):
    with pytest.raises(NotFoundError) as exc_info:
        service.add_item("faq", {"question": "Q?", "answer": "A."})

    assert exc_info.value.message == "FAQ data not found"
    assert not (tmp_path / "faq.json").exists()


def test_invalid_item_is_not_written(service, tmp_path: Path):
    path = write_document(tmp_path, "faq", SAMPLE_FAQ)
    before = path.read_text(encoding="utf-8")

    with pytest.raises(ValidationError):
        service.add_item("faq", {"question": "Q?"})

    assert path.read_text(encoding="utf-8") == before


def test_update_item_preserves_id(service, tmp_path: Path):
    write_document(tmp_path, "faq", SAMPLE_FAQ)

    item = service.update_item("faq", 1, {"id": 99, "question": "New?", "answer": "Yes."})

    assert item["id"] == 1
    stored = read_document(tmp_path, "faq")
    assert stored["items"] == [
        {"id": 1, "question": "New?", "answer": "Yes.", "category": "general", "order": 0},
    ]


def test_delete_missing_item_does_not_write(service, tmp_path: Path):
    path = write_document(tmp_path, "faq", SAMPLE_FAQ)
    before = path.read_text(encoding="utf-8")

    with pytest.raises(NotFoundError) as exc_info:
        service.delete_item("faq", 404)

    assert exc_info.value.message == "FAQ item 404 not found"
    assert path.read_text(encoding="utf-8") == before
    assert not (tmp_path / "faq.json.backup").exists()


def test_add_then_delete_net_effect(service, tmp_path: Path):
    write_document(tmp_path, "faq", SAMPLE_FAQ)

    first = service.add_item("faq", {"question": "One?", "answer": "1"})
    second = service.add_item("faq", {"question": "Two?", "answer": "2"})
    removed = service.delete_item("faq", first["id"])

    assert removed["question"] == "One?"
    ids = [item["id"] for item in service.get_document("faq")["items"]]
    assert ids == [1, second["id"]]


def test_item_operations_need_a_collection(service):
    with pytest.raises(NotFoundError):
        service.add_item("hero", {"title": "x"})


def test_replace_document_validates_and_stamps(service, tmp_path: Path):
    document = service.replace_document("hero", {
        "title": "X",
        "atelierTitle": "Y",
        "atelierDescription": "Z",
    })

    assert "updatedAt" in document
    assert read_document(tmp_path, "hero")["title"] == "X"

    with pytest.raises(ValidationError):
        service.replace_document("hero", {"title": "X"})


def test_replace_document_assigns_missing_item_ids(service, tmp_path: Path):
    document = dict(SAMPLE_FAQ, items=[
        {"id": 4, "question": "First?", "answer": "Yes."},
        {"question": "Second?", "answer": "Yes."},
        {"question": "Third?", "answer": "Yes."},
    ])

    stored = service.replace_document("faq", document)

    assert [item["id"] for item in stored["items"]] == [4, 5, 6]
    assert [item["id"] for item in read_document(tmp_path, "faq")["items"]] == [4, 5, 6]


def test_replace_document_rejects_duplicate_item_ids(service, tmp_path: Path):
    write_document(tmp_path, "faq", SAMPLE_FAQ)
    document = dict(SAMPLE_FAQ, items=[
        {"id": 5, "question": "First?", "answer": "Yes."},
        {"id": 5, "question": "Second?", "answer": "Yes."},
    ])

    with pytest.raises(ValidationError) as exc_info:
        service.replace_document("faq", document)

    assert exc_info.value.details == [{"field": "items.1.id", "message": "Duplicate id", "value": 5}]
    assert read_document(tmp_path, "faq") == SAMPLE_FAQ


def test_concurrent_adds_get_distinct_ids(service, tmp_path: Path):
    write_document(tmp_path, "faq", SAMPLE_FAQ)

    def add(n):
        return service.add_item("faq", {"question": f"Question {n}?", "answer": "Yes."})

    with ThreadPoolExecutor(max_workers=8) as pool:
        added = list(pool.map(add, range(20)))

    assert sorted(item["id"] for item in added) == list(range(2, 22))
    stored = read_document(tmp_path, "faq")["items"]
    assert len(stored) == 21
    assert len({item["id"] for item in stored}) == 21
