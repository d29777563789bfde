"""
Test suite for the storage service (local filesystem fallback)
"""
import pytest

from shadi_venue.core.errors import InvalidArgumentError, UpstreamError


class TestLocalStorage:
    """Files stored under the upload directory"""

    def test_upload_get_delete(self, run, storage, test_image):
        content = test_image()
        success, url = run(storage.upload_file("invites/a.png", content, "image/png"))

        assert success, url
        assert url == "/api/uploads/invites/a.png"
        assert (storage.upload_dir / "invites" / "a.png").read_bytes() == content
        assert run(storage.get_file("invites/a.png")) == content

        assert run(storage.delete_file("invites/a.png")) is True
        assert run(storage.get_file("invites/a.png")) is None
        assert run(storage.delete_file("invites/a.png")) is True, "Deleting a missing file is not an error"

    def test_keys_cannot_escape_upload_dir(self, run, storage):
        with pytest.raises(InvalidArgumentError):
            run(storage.get_file("../../secret.txt"))


class TestImageValidation:
    def test_accepts_png_and_jpeg(self, storage, test_image):
        storage.validate_image("a.png", test_image(fmt="PNG"))
        storage.validate_image("a.jpg", test_image(fmt="JPEG"))

    @pytest.mark.parametrize("content", [b"", b"plain text pretending to be an image"])
    def test_rejects_non_images(self, storage, content):
        with pytest.raises(InvalidArgumentError):
            storage.validate_image("bad.png", content)


class TestUploadImages:
    """Concurrent batch uploads with rollback"""

    def test_urls_in_input_order(self, run, storage, test_image):
        files = [(f"img{i}.png", test_image(color), "image/png") for i, color in enumerate(["red", "green", "blue"])]

        urls = run(storage.upload_images(files))

        assert len(urls) == 3
        for i, url in enumerate(urls):
            assert url.endswith(f"_img{i}.png")
        assert len(list(storage.upload_dir.rglob("*.png"))) == 3

    def test_empty_batch(self, run, storage):
        assert run(storage.upload_images([])) == []

    def test_invalid_image_uploads_nothing(self, run, storage, test_image):
        files = [("good.png", test_image(), "image/png"), ("bad.png", b"nope", "image/png")]
        with pytest.raises(InvalidArgumentError):
            run(storage.upload_images(files))
        assert not storage.upload_dir.exists()

    def test_failed_upload_rolls_back(self, run, storage, test_image, monkeypatch):
        """One failed upload removes the ones that already succeeded"""
        real_upload = storage.upload_file

        async def flaky_upload(key, content, content_type='image/jpeg'):
            if key.endswith("_broken.png"):
                return False, "simulated outage"
            return await real_upload(key, content, content_type)

        monkeypatch.setattr(storage, "upload_file", flaky_upload)
        files = [
            ("ok1.png", test_image("red"), "image/png"),
            ("broken.png", test_image("green"), "image/png"),
            ("ok2.png", test_image("blue"), "image/png"),
        ]

        with pytest.raises(UpstreamError):
            run(storage.upload_images(files))

        assert list(storage.upload_dir.rglob("*.png")) == [], "Successful uploads should be rolled back"
        print("✓ Partial upload rolled back")
