from pathlib import Path

import pytest
from PIL import Image as PILImage

from garage_sale.core.config import settings
from garage_sale.models.images import Image


def upload(client, headers, content, filename="chair.png", mime="image/png", **fields):
    data = {"title": "Chair", "price": "10", **fields}
    files = {"image": (filename, content, mime)} if content is not None else None
    return client.post("/images", data=data, files=files, headers=headers)


def stored_file(upload_dir, image_url) -> Path:
    return upload_dir / Path(image_url).name


def test_upload_round_trip(client, admin_headers, image_bytes, upload_dir):
    """POST /images then GET /images shows the new listing (201 Created)."""
    response = upload(client, admin_headers, image_bytes())

    assert response.status_code == 201
    created = response.json()
    assert created["title"] == "Chair"
    assert created["image_url"].startswith("/uploads/")
    assert created["image_url"].endswith(".webp")

    listings = client.get("/images").json()
    assert len(listings) == 1
    listing = listings[0]
    assert listing["title"] == "Chair"
    assert listing["price"] == 10.00
    assert listing["sold"] is False
    assert listing["is_blocked"] is False
    assert listing["coming_soon"] is False
    assert listing["description"] is None


def test_upload_leaves_only_the_processed_file(client, admin_headers, image_bytes, upload_dir):
    response = upload(client, admin_headers, image_bytes("JPEG"), filename="chair.JPG", mime="image/jpeg")

    assert response.status_code == 201
    files = sorted(entry.name for entry in upload_dir.iterdir())
    assert files == [Path(response.json()["image_url"]).name]


def test_upload_is_served_statically(client, admin_headers, image_bytes):
    image_url = upload(client, admin_headers, image_bytes()).json()["image_url"]

    response = client.get(image_url)

    assert response.status_code == 200
    assert response.content[:4] == b"RIFF"
    assert response.content[8:12] == b"WEBP"


@pytest.mark.parametrize(
    "size,expected",
    [
        ((1600, 1200), (800, 600)),
        ((600, 1200), (300, 600)),
        ((2000, 500), (800, 200)),
        ((200, 100), (200, 100)),
    ],
)
def test_upload_resized_to_fit_without_upscaling(client, admin_headers, image_bytes, upload_dir, size, expected):
    response = upload(client, admin_headers, image_bytes(size=size))

    with PILImage.open(stored_file(upload_dir, response.json()["image_url"])) as img:
        assert img.format == "WEBP"
        assert img.size == expected


def test_upload_webp_input_with_transparency(client, admin_headers, image_bytes, upload_dir):
    response = upload(
        client,
        admin_headers,
        image_bytes("WEBP", mode="RGBA"),
        filename="lamp.webp",
        mime="image/webp",
    )

    assert response.status_code == 201
    files = list(upload_dir.iterdir())
    assert len(files) == 1
    with PILImage.open(files[0]) as img:
        assert img.mode == "RGBA"


def test_upload_trims_text_fields(client, admin_headers, image_bytes):
    response = upload(
        client,
        admin_headers,
        image_bytes(),
        title="  Oak chair  ",
        description="  sturdy  ",
        price="12.499",
    )

    body = response.json()
    assert body["title"] == "Oak chair"
    assert body["description"] == "sturdy"
    assert body["price"] == 12.50


def test_upload_without_file_400(client, admin_headers, count_rows):
    response = upload(client, admin_headers, None)

    assert response.status_code == 400
    assert response.json() == {"error": "No image uploaded"}
    assert count_rows(Image) == 0


@pytest.mark.parametrize(
    "filename,mime",
    [
        ("notes.txt", "text/plain"),
        ("chair.png", "application/pdf"),
        ("chair.bmp", "image/bmp"),
    ],
)
def test_upload_unsupported_type_415(client, admin_headers, image_bytes, upload_dir, filename, mime):
    response = upload(client, admin_headers, image_bytes(), filename=filename, mime=mime)

    assert response.status_code == 415
    assert list(upload_dir.iterdir()) == []


def test_file_type_checked_before_fields(client, admin_headers):
    response = upload(client, admin_headers, b"hello", filename="notes.txt", mime="text/plain", title="", price="-1")

    assert response.status_code == 415


def test_upload_too_large_413(client, admin_headers, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)

    response = upload(client, admin_headers, b"\0" * (1024 * 1024 + 1), title="")

    assert response.status_code == 413
    assert list(upload_dir.iterdir()) == []


@pytest.mark.parametrize(
    "fields",
    [
        {"title": ""},
        {"title": "   "},
        {"price": "abc"},
        {"price": "0"},
        {"price": "-5"},
        {"price": "0.001"},
        {"price": "NaN"},
        {"price": "100000000"},
        {"price": "1e30"},
        {"price": "123456789012345678901234567890"},
        {"price": "1e999"},
        {"price": "-1e999"},
        {"title": "x" * 256},
    ],
)
def test_upload_invalid_fields_400(client, admin_headers, image_bytes, upload_dir, count_rows, fields):
    response = upload(client, admin_headers, image_bytes(), **fields)

    assert response.status_code == 400
    assert "error" in response.json()
    assert count_rows(Image) == 0
    assert list(upload_dir.iterdir()) == []


def test_undecodable_image_leaves_no_trace(client, admin_headers, upload_dir, count_rows):
    """A file that passes the type check but cannot be decoded (500)."""
    response = upload(client, admin_headers, b"definitely not a png")

    assert response.status_code == 500
    assert response.json() == {"error": "Image processing failed"}
    assert count_rows(Image) == 0
    assert list(upload_dir.iterdir()) == []


def test_encoder_failure_removes_partial_output(client, admin_headers, image_bytes, upload_dir, count_rows, monkeypatch):
    def broken_save(self, fp, *args, **kwargs):
        Path(fp).write_bytes(b"half a file")
        raise OSError("disk full")

    content = image_bytes()
    monkeypatch.setattr(PILImage.Image, "save", broken_save)

    response = upload(client, admin_headers, content)

    assert response.status_code == 500
    assert count_rows(Image) == 0
    assert list(upload_dir.iterdir()) == []


def test_upload_title_at_length_limit(client, admin_headers, image_bytes):
    response = upload(client, admin_headers, image_bytes(), title="x" * 255)

    assert response.status_code == 201
    assert len(response.json()["title"]) == 255
