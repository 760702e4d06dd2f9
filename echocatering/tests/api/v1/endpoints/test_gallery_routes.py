import pytest

from echocatering.api.main import app
from echocatering.api.v1.services.cloudinary_client import CloudinaryError, get_cloudinary_client
from echocatering.models.models.gallery import GalleryBeanie
from echocatering.tests.conftest import beanie_setup

pytestmark = pytest.mark.usefixtures("unauthenticated_mode")

CDN = "https://res.cloudinary.com/echo/image/upload/v1"


class DeletingCloudinaryClient:
    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.deleted: list[tuple[str, str]] = []

    async def delete_resource(self, public_id, resource_type="image"):
        if public_id in self.failing:
            raise CloudinaryError("Resource not found", http_code=404)
        self.deleted.append((public_id, resource_type))
        return True


@pytest.fixture
def cloudinary():
    client = DeletingCloudinaryClient(failing={"gallery/broken"})
    app.dependency_overrides[get_cloudinary_client] = lambda: client
    yield client
    app.dependency_overrides.pop(get_cloudinary_client, None)


async def seed_gallery() -> list[GalleryBeanie]:
    images = [
        GalleryBeanie(
            filename="bar.jpg",
            original_name="Bar.jpg",
            category="events",
            order=1,
            tags=["wedding", "outdoor"],
            cloudinary_url=f"{CDN}/gallery/bar.jpg",
            cloudinary_public_id="gallery/bar",
        ),
        GalleryBeanie(
            filename="toast.jpg",
            original_name="Toast.jpg",
            category="events",
            order=0,
            featured=True,
            tags=["wedding"],
        ),
        GalleryBeanie(
            filename="clip.mp4",
            original_name="Clip.mp4",
            category="cocktails",
            mime_type="video/mp4",
            is_active=False,
            cloudinary_public_id="gallery/clip",
        ),
        GalleryBeanie(
            filename="old.jpg",
            original_name="Old.jpg",
            category="food",
            cloudinary_public_id="gallery/broken",
        ),
    ]
    for image in images:
        await image.insert()
    return images


class TestGalleryRoutes:
    @beanie_setup([GalleryBeanie])
    async def test_list_sorts_by_category_then_order(self, async_client):
        await seed_gallery()

        images = (await async_client.get("/api/v1/gallery")).json()

        assert [image["filename"] for image in images] == [
            "clip.mp4",
            "toast.jpg",
            "bar.jpg",
            "old.jpg",
        ]
        assert images[2]["image_path"] == f"{CDN}/gallery/bar.jpg"
        assert images[1]["image_path"] == "/gallery/toast.jpg"

    @beanie_setup([GalleryBeanie])
    async def test_list_filters(self, async_client):
        await seed_gallery()

        by_tag = await async_client.get("/api/v1/gallery", params={"tags": "outdoor,rooftop"})
        featured = await async_client.get("/api/v1/gallery", params={"featured": True})
        inactive = await async_client.get("/api/v1/gallery", params={"active": False})

        assert [image["filename"] for image in by_tag.json()] == ["bar.jpg"]
        assert [image["filename"] for image in featured.json()] == ["toast.jpg"]
        assert [image["filename"] for image in inactive.json()] == ["clip.mp4"]

    @beanie_setup([GalleryBeanie])
    async def test_categories_and_tags(self, async_client):
        await seed_gallery()

        categories = (await async_client.get("/api/v1/gallery/categories")).json()
        tags = (await async_client.get("/api/v1/gallery/tags")).json()

        assert categories[1] == {
            "category": "events",
            "count": 2,
            "active_count": 2,
            "featured_count": 1,
        }
        assert tags == ["outdoor", "wedding"]

    @beanie_setup([GalleryBeanie])
    async def test_create_goes_last_in_category(self, async_client):
        await seed_gallery()

        response = await async_client.post(
            "/api/v1/gallery",
            json={"filename": "dance.jpg", "original_name": "Dance.jpg", "category": "events"},
        )

        assert response.status_code == 201
        assert response.json()["order"] == 2
        assert response.json()["thumbnail_path"] == "/gallery/thumbnails/dance_thumb.jpg"

    @beanie_setup([GalleryBeanie])
    async def test_create_rejects_duplicate_filename(self, async_client):
        await seed_gallery()

        response = await async_client.post(
            "/api/v1/gallery", json={"filename": "bar.jpg", "original_name": "Again.jpg"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Image with this filename already exists"

    @beanie_setup([GalleryBeanie])
    async def test_update_and_toggles(self, async_client):
        images = await seed_gallery()
        image_id = images[0].id

        updated = await async_client.put(
            f"/api/v1/gallery/{image_id}", json={"title": "Open bar", "tags": ["rooftop"]}
        )
        toggled = await async_client.put(f"/api/v1/gallery/{image_id}/toggle")
        featured = await async_client.put(f"/api/v1/gallery/{image_id}/feature")

        assert updated.json()["title"] == "Open bar"
        assert updated.json()["tags"] == ["rooftop"]
        assert toggled.json()["is_active"] is False
        assert featured.json()["featured"] is True

    @beanie_setup([GalleryBeanie])
    async def test_reorder_is_all_or_nothing(self, async_client):
        images = await seed_gallery()
        bar, toast, clip = images[0], images[1], images[2]

        rejected = await async_client.put(
            "/api/v1/gallery/reorder",
            json={"category": "events", "image_ids": [str(bar.id), str(clip.id)]},
        )
        assert rejected.status_code == 400
        assert (await GalleryBeanie.get(bar.id)).order == 1

        accepted = await async_client.put(
            "/api/v1/gallery/reorder",
            json={"category": "events", "image_ids": [str(bar.id), str(toast.id)]},
        )
        assert [image["filename"] for image in accepted.json()] == ["bar.jpg", "toast.jpg"]

    @beanie_setup([GalleryBeanie])
    async def test_delete_removes_remote_asset(self, async_client, cloudinary):
        images = await seed_gallery()

        response = await async_client.delete(f"/api/v1/gallery/{images[2].id}")

        assert response.status_code == 200
        assert cloudinary.deleted == [("gallery/clip", "video")]
        assert await GalleryBeanie.get(images[2].id) is None

    @beanie_setup([GalleryBeanie])
    async def test_delete_survives_cloudinary_failure(self, async_client, cloudinary):
        images = await seed_gallery()

        response = await async_client.delete(f"/api/v1/gallery/{images[3].id}")

        assert response.status_code == 200
        assert await GalleryBeanie.get(images[3].id) is None

    @beanie_setup([GalleryBeanie])
    async def test_purge_requires_confirmation(self, async_client, cloudinary):
        await seed_gallery()

        response = await async_client.delete("/api/v1/gallery/purge")

        assert response.status_code == 400
        assert await GalleryBeanie.find_all().count() == 4
        assert cloudinary.deleted == []

    @beanie_setup([GalleryBeanie])
    async def test_purge(self, async_client, cloudinary):
        await seed_gallery()

        response = await async_client.delete("/api/v1/gallery/purge", params={"confirm": True})

        assert response.json() == {
            "success": True,
            "deleted_documents": 4,
            "attempted_cloudinary_deletes": 3,
            "cloudinary_deleted": 2,
            "cloudinary_failed": 1,
        }
        assert await GalleryBeanie.find_all().count() == 0

    @beanie_setup([GalleryBeanie])
    async def test_missing_image_is_404(self, async_client):
        response = await async_client.get("/api/v1/gallery/65f1c0ffee0000000000abcd")
        assert response.status_code == 404
