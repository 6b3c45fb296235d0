import httpx
import pytest

from src.core.config import get_settings
from src.core.errors import UploadError
from src.db.models import Banner, HomeSection
from src.services import media
from src.services.store_settings import STORE_INFO_KEY, media_history, put_setting, record_media


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestUploadImage:
    def test_posts_unsigned_upload_and_returns_secure_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.read()
            return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo-cloud/image/upload/v1/apple.jpg"})

        url = media.upload_image(b"\x89PNG", "apple.png", "image/png", client=mock_client(handler))

        assert url == "https://res.cloudinary.com/demo-cloud/image/upload/v1/apple.jpg"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo-cloud/image/upload"
        assert b"unsigned-preset" in seen["body"]
        assert b'filename="apple.png"' in seen["body"]

    def test_cdn_error_message_is_passed_through(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "Invalid image file"}})

        with pytest.raises(UploadError, match="Invalid image file"):
            media.upload_image(b"x", "notes.txt", client=mock_client(handler))

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UploadError, match="connection refused"):
            media.upload_image(b"x", "a.png", client=mock_client(handler))

    def test_missing_url_in_response(self):
        with pytest.raises(UploadError, match="did not include"):
            media.upload_image(b"x", "a.png", client=mock_client(lambda request: httpx.Response(200, json={})))

    def test_not_configured(self):
        settings = get_settings().model_copy(update={"cloudinary_upload_preset": None})
        with pytest.raises(UploadError, match="not configured"):
            media.upload_image(b"x", "a.png", settings=settings)

    def test_empty_file(self):
        with pytest.raises(UploadError, match="empty"):
            media.upload_image(b"", "a.png")


class TestMediaHistory:
    def test_newest_first_without_duplicates_and_capped(self, session):
        for name in ("a", "b", "c", "a"):
            record_media(session, f"https://cdn.example.com/{name}.jpg", limit=3)
        record_media(session, "https://cdn.example.com/d.jpg", limit=3)
        assert [h["name"] for h in media_history(session)] == ["d.jpg", "a.jpg", "c.jpg"]

    def test_upload_and_record(self, session):
        client = mock_client(lambda request: httpx.Response(200, json={"secure_url": "https://cdn.example.com/new.jpg"}))
        assert media.upload_and_record(session, b"x", "new.jpg", client=client) == {"url": "https://cdn.example.com/new.jpg", "name": "new.jpg"}
        assert media_history(session)[0]["url"] == "https://cdn.example.com/new.jpg"


class TestImageLibrary:
    def test_collects_every_known_image_once(self, session, catalog):
        record_media(session, "https://cdn.example.com/upload.jpg", "Upload One")
        session.add_all(
            [
                Banner(type="slider", image_url="https://cdn.example.com/hero.jpg"),
                HomeSection(
                    type="three-column-banners",
                    title="Promo",
                    banner={"image_url": "https://cdn.example.com/apple.jpg"},
                    grid_banners=[{"image_url": "https://cdn.example.com/grid.jpg"}],
                ),
            ]
        )
        put_setting(session, STORE_INFO_KEY, {"logo_url": "https://cdn.example.com/logo.png"})
        session.commit()

        library = media.image_library(session)
        urls = [img["url"] for img in library]
        assert library[0] == {"url": "https://cdn.example.com/upload.jpg", "name": "Upload One", "source": "Upload"}
        assert len(urls) == len(set(urls))
        for expected in ("apple.jpg", "milk-s.jpg", "hero.jpg", "grid.jpg", "logo.png"):
            assert f"https://cdn.example.com/{expected}" in urls

    def test_search_by_name(self, session, catalog):
        assert [img["name"] for img in media.image_library(session, " ORANGE ")] == ["orange.jpg"]
