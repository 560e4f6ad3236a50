"""
Pytest configuration and fixtures for the Studio content API tests.
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from studio_cms.models.user import User
from studio_cms.utils.config import (
    AuthSettings,
    LoggingSettings,
    RateLimitSettings,
    Settings,
    StorageSettings,
)
from studio_web.main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
ADMIN_EMAIL = "admin@studiopickens.com"

TRANSFORM = {"scale": 1, "translateX": 0, "translateY": 0, "flip": False}

SAMPLE_HERO = {
    "title": "Studio Pickens",
    "subtitle": "Set design and fabrication",
    "atelierTitle": "The Atelier",
    "atelierDescription": "Brooklyn and Beverly Hills",
}

SAMPLE_WORK = {
    "banner": {
        "title": "Work",
        "subtitle": "Selected projects",
        "desktopImage": "/images/work/banner-desktop.jpg",
        "mobileImage": "/images/work/banner-mobile.jpg",
        "transform": TRANSFORM,
    },
    "projects": [
        {
            "id": 1,
            "title": "Spring Issue",
            "client": "Vogue",
            "category": "EDITORIAL",
            "year": 2022,
            "image": "/images/work/spring.jpg",
            "alt": "Spring cover",
            "featured": True,
            "order": 1,
        },
        {
            "id": 2,
            "title": "Arena Tour",
            "client": "Band",
            "category": "CONCERT",
            "year": 2023,
            "image": "/images/work/tour.png",
            "order": 2,
        },
    ],
}

SAMPLE_FAQ = {
    "banner": {
        "backgroundImage": {
            "desktop": "/images/faq/banner-desktop.jpg",
            "mobile": "/images/faq/banner-mobile.jpg",
        },
        "height": "60vh",
        "objectPosition": "center",
        "transform": TRANSFORM,
    },
    "items": [
        {"id": 1, "question": "Where are you based?", "answer": "Brooklyn.", "category": "general", "order": 1},
    ],
}

SAMPLE_PROCESS = {
    "banner": {
        "title": "Process",
        "desktopImage": "/images/process/banner.jpg",
        "mobileImage": "/images/process/banner-mobile.jpg",
        "transform": TRANSFORM,
    },
    "processSteps": [
        {
            "id": 1,
            "title": "Concept",
            "description": "We sketch.",
            "image": "/images/process/concept.jpg",
            "alt": "Sketches",
            "alignment": "left",
            "order": 1,
        },
    ],
}

SAMPLE_LOCATIONS = {
    "banner": {"title": "Locations"},
    "locations": [
        {
            "id": 1,
            "name": "Brooklyn",
            "address": "1 Dock Street, Brooklyn, NY",
            "image": "/images/locations/brooklyn.jpg",
            "alt": "Brooklyn studio",
            "order": 1,
        },
    ],
}

SAMPLE_STORY = {
    "circles": [
        {
            "id": 1,
            "name": "Origins",
            "type": "simple",
            "position": {"desktop": {"top": "10%", "left": "5%"}, "mobile": {"top": "5%"}},
            "size": {
                "desktop": {"width": "400px", "height": "400px"},
                "mobile": {"width": "250px", "height": "250px"},
            },
            "content": {"title": "Where it began"},
            "items": [],
        },
    ],
}

SAMPLE_CONTACT = {
    "emails": {
        "brooklyn": "brooklyn@studiopickens.com",
        "beverlyHills": "la@studiopickens.com",
        "press": "press@studiopickens.com",
    },
    "phone": "+1 (718) 555-0100",
}


def write_document(data_dir: Path, kind: str, document) -> Path:
    path = data_dir / f"{kind}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def read_document(data_dir: Path, kind: str):
    return json.loads((data_dir / f"{kind}.json").read_text(encoding="utf-8"))


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def settings(data_dir: Path, public_dir: Path) -> Settings:
    """Isolated settings: temp storage, fast bcrypt, no rate limiting"""
    return Settings(
        auth=AuthSettings(
            jwt_secret="test-secret",
            admin_username=ADMIN_USERNAME,
            admin_password=ADMIN_PASSWORD,
            admin_email=ADMIN_EMAIL,
            bcrypt_rounds=4,
        ),
        storage=StorageSettings(data_path=str(data_dir), public_path=str(public_dir)),
        rate_limit=RateLimitSettings(enabled=False),
        logging=LoggingSettings(level="WARNING"),
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def seeded(data_dir: Path):
    """Write valid sample documents for the collection-bearing resources"""
    write_document(data_dir, "hero", SAMPLE_HERO)
    write_document(data_dir, "work", SAMPLE_WORK)
    write_document(data_dir, "faq", SAMPLE_FAQ)
    write_document(data_dir, "process", SAMPLE_PROCESS)
    return data_dir


@pytest.fixture
def admin_token(client) -> str:
    response = client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def admin_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(app) -> dict:
    """Token for a non-admin account"""
    user = User(
        id=2,
        username="editor",
        email="editor@example.com",
        password_hash="x",
        role="user",
        created_at="2024-01-01T00:00:00Z",
    )
    token = app.state.token_service.issue(user)
    return {"Authorization": f"Bearer {token}"}
