import pytest

from echocatering.api.cache import TTLCache, get_cache
from echocatering.api.main import app
from echocatering.api.v1.services.cloudinary_client import CloudinaryError, get_cloudinary_client


def resource(public_id: str, created_at: str, **extra) -> dict:
    return {
        "public_id": public_id,
        "secure_url": f"https://res.cloudinary.com/echo/{public_id}",
        "format": "jpg",
        "width": 1200,
        "height": 800,
        "created_at": created_at,
        **extra,
    }


class FakeCloudinaryClient:
    def __init__(self, listings: dict[tuple[str, str], list[dict]] | None = None, error=None):
        self.listings = listings or {}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def config_summary(self):
        return {"cloud_name": "echo", "has_api_key": True, "has_api_secret": True}

    async def list_by_prefix(self, prefix, resource_type="image", max_results=500):
        self.calls.append((prefix, resource_type))
        if self.error:
            raise self.error
        return self.listings.get((prefix, resource_type), [])[:max_results]

    async def ping(self):
        if self.error:
            raise self.error
        return {"status": "ok"}


GALLERY = {
    ("echo-catering/gallery", "image"): [
        resource("gallery/a", "2024-05-01T10:00:00Z"),
        resource("gallery/b", "2024-06-01T10:00:00Z"),
        {"public_id": "gallery/no-url", "created_at": "2024-07-01T10:00:00Z"},
    ],
    ("echo-catering/gallery", "video"): [
        resource("gallery/clip", "2024-05-15T10:00:00Z", duration=12.5, format="mp4"),
    ],
    ("echo-catering/logo", "image"): [
        resource("logo/old", "2023-01-01T00:00:00Z"),
        resource("logo/new", "2024-01-01T00:00:00Z"),
    ],
}


@pytest.fixture
def cloudinary():
    client = FakeCloudinaryClient(GALLERY)
    cache = TTLCache(ttl=15)
    app.dependency_overrides[get_cloudinary_client] = lambda: client
    app.dependency_overrides[get_cache] = lambda: cache
    yield client
    app.dependency_overrides.pop(get_cloudinary_client, None)
    app.dependency_overrides.pop(get_cache, None)


def test_gallery_lists_images_and_videos_newest_first(test_client, cloudinary):
    items = test_client.get("/api/v1/media/gallery").json()

    assert [item["public_id"] for item in items] == ["gallery/b", "gallery/clip", "gallery/a"]
    assert items[1]["resource_type"] == "video"
    assert items[1]["duration"] == 12.5


def test_gallery_is_cached(test_client, cloudinary):
    test_client.get("/api/v1/media/gallery")
    test_client.get("/api/v1/media/gallery")

    assert cloudinary.calls == [
        ("echo-catering/gallery", "image"),
        ("echo-catering/gallery", "video"),
    ]


def test_gallery_upstream_failure_is_502(test_client, cloudinary):
    cloudinary.error = CloudinaryError("Invalid api_key", http_code=401)

    response = test_client.get("/api/v1/media/gallery")

    assert response.status_code == 502
    body = response.json()
    assert body["message"] == "Cloudinary gallery listing failed"
    assert body["error"]["http_code"] == 401


def test_logo_is_newest_image(test_client, cloudinary):
    logo = test_client.get("/api/v1/media/logo").json()

    assert logo["public_id"] == "logo/new"
    assert logo["content"].endswith("logo/new")
    assert logo["alt_text"] == "ECHO Catering Logo"


def test_missing_logo_returns_empty_payload_and_is_cached(test_client, cloudinary):
    cloudinary.listings = {}

    first = test_client.get("/api/v1/media/logo").json()
    second = test_client.get("/api/v1/media/logo").json()

    assert first == second
    assert first["content"] == ""
    assert first["public_id"] == ""
    assert first["title"] == "ECHO Catering Logo"
    assert first["created_at"] is None
    assert cloudinary.calls == [("echo-catering/logo", "image")]


def test_ping(test_client, cloudinary):
    body = test_client.get("/api/v1/media/ping").json()
    assert body["ok"] is True
    assert body["result"] == {"status": "ok"}

    cloudinary.error = CloudinaryError("timeout", name="ReadTimeout")
    failed = test_client.get("/api/v1/media/ping")
    assert failed.status_code == 502
    assert failed.json()["ok"] is False


def test_gallery_layout_uses_images_only(test_client, cloudinary):
    body = test_client.get(
        "/api/v1/media/gallery/layout", params={"viewport": "desktop"}
    ).json()

    assert body["image_count"] == 2
    assert body["sequence_count"] == 1
    assert body["columns"] == 9
    assert body["rows"] == 4
    assert all("clip" not in tile["src"] for tile in body["tiles"])
    assert body["tiles"][0]["grid_column"] == "1 / span 4"
    assert body["metrics"] is None


def test_gallery_layout_mobile_with_metrics(test_client, cloudinary):
    body = test_client.get(
        "/api/v1/media/gallery/layout",
        params={"viewport": "mobile", "viewport_width": 390, "viewport_height": 844},
    ).json()

    assert body["columns"] == 5
    assert body["metrics"] == {"cell_size": 68, "gap": 4}


def test_gallery_layout_empty(test_client):
    client = FakeCloudinaryClient()
    app.dependency_overrides[get_cloudinary_client] = lambda: client
    app.dependency_overrides[get_cache] = lambda: TTLCache(ttl=15)
    try:
        body = test_client.get("/api/v1/media/gallery/layout").json()
    finally:
        app.dependency_overrides.pop(get_cloudinary_client, None)
        app.dependency_overrides.pop(get_cache, None)

    assert body["tiles"] == []
    assert body["message"] == "No gallery images found"
