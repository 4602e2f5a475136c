import os

import pytest

from urban_harvest.services import upload_service
from urban_harvest.utils.settings import UPLOAD_DIR

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_image(client, customer):
    _, headers = customer
    r = client.post(
        "/api/upload/",
        params={"type": "products"},
        files={"image": ("tomato.png", PNG, "image/png")},
        headers=headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["imageUrl"].startswith("/uploads/products/")
    assert os.path.isfile(os.path.join(UPLOAD_DIR, body["public_id"]))

    served = client.get(body["imageUrl"])
    assert served.status_code == 200
    assert served.content == PNG


def test_unknown_type_goes_to_others(client, customer):
    _, headers = customer
    r = client.post(
        "/api/upload/",
        params={"type": "secrets"},
        files={"image": ("a.jpg", PNG, "image/jpeg")},
        headers=headers,
    )
    assert r.json()["public_id"].startswith("others/")


def test_upload_rejects_non_images(client, customer):
    _, headers = customer
    r = client.post("/api/upload/", files={"image": ("notes.txt", b"hello", "text/plain")}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"].startswith("Only image files")


def test_upload_rejects_large_files(client, customer, monkeypatch):
    _, headers = customer
    monkeypatch.setattr(upload_service, "MAX_UPLOAD_BYTES", 16)
    r = client.post("/api/upload/", files={"image": ("big.png", PNG, "image/png")}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"].startswith("File too large")


def test_upload_requires_file(client, customer):
    _, headers = customer
    r = client.post("/api/upload/", headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "No file uploaded"


def test_delete_image(client, customer, admin):
    _, headers = customer
    _, admin_headers = admin
    public_id = client.post(
        "/api/upload/", files={"image": ("a.webp", PNG, "image/webp")}, headers=headers
    ).json()["public_id"]

    assert client.delete("/api/upload/", params={"public_id": public_id}, headers=headers).status_code == 403
    r = client.delete("/api/upload/", params={"public_id": public_id}, headers=admin_headers)
    assert r.status_code == 200
    assert not os.path.exists(os.path.join(UPLOAD_DIR, public_id))

    r = client.delete("/api/upload/", params={"public_id": public_id}, headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.parametrize("public_id, error", [
    ("../../etc/passwd", "Invalid file path"),
    ("products/default.png", "Cannot delete default images"),
])
def test_delete_image_refuses(client, admin, public_id, error):
    _, headers = admin
    r = client.delete("/api/upload/", params={"public_id": public_id}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == error


def test_profile_image(client, customer):
    _, headers = customer
    r = client.post("/api/upload/profile-image", files={"image": ("me.png", PNG, "image/png")}, headers=headers)
    assert r.status_code == 200
    assert r.json()["imageUrl"].startswith("/uploads/profiles/")

    me = client.get("/api/auth/me", headers=headers).json()["user"]
    assert me["profile_image"] == r.json()["imageUrl"]
