from io import BytesIO

import pytest
from PIL import Image

from conftest import login, register
from storefront.auth.models import User
from storefront.categories.models import Category
from storefront.core.errors import Conflict
from storefront.products import service
from storefront.products.models import Product


def _category(client, name="Mugs"):
    return client.post("/api/v1/category", json={"name": name}).json()["data"]["id"]


def _create(client, png_bytes, *, title="Blue Mug", category_ids=None, filename="Blue Mug.png", **extra):
    data = {
        "title": title,
        "description": extra.pop("description", "A Sturdy Mug"),
        "price": extra.pop("price", "12.5"),
        "category_ids": category_ids if category_ids is not None else [_category(client)],
    }
    return client.post(
        "/api/v1/product",
        data=data,
        files={"image": (filename, png_bytes, "image/png")},
    )


def test_create_product_stores_compressed_image(auth_client, png_bytes, upload_dir):
    r = _create(auth_client, png_bytes)
    assert r.status_code == 201, r.text
    product = r.json()["data"]
    assert product["title"] == "blue mug"
    assert product["description"] == "a sturdy mug"
    assert product["price"] == 12.5
    assert product["slug"] == "blue-mug"
    assert [c["name"] for c in product["categories"]] == ["mugs"]
    assert product["image"].endswith("-blue-mug.png")

    stored = upload_dir / product["image"]
    assert stored.exists()
    with Image.open(stored) as img:
        assert img.format == "JPEG"
        assert img.width == 800
        assert img.height == 450


def test_duplicate_titles_get_numbered_slugs(auth_client, png_bytes):
    cat = _category(auth_client)
    assert _create(auth_client, png_bytes, category_ids=[cat]).json()["data"]["slug"] == "blue-mug"
    assert _create(auth_client, png_bytes, category_ids=[cat]).json()["data"]["slug"] == "blue-mug-1"
    assert _create(auth_client, png_bytes, category_ids=[cat]).json()["data"]["slug"] == "blue-mug-2"


def test_create_requires_categories_that_exist(auth_client, png_bytes, upload_dir):
    r = _create(auth_client, png_bytes, category_ids=[])
    assert r.status_code == 400
    assert r.json()["message"] == "At least one category ID is required"

    r = _create(auth_client, png_bytes, category_ids=["cat_missing"])
    assert r.status_code == 404
    assert r.json()["message"] == "One or more categories not found"
    assert not upload_dir.exists() or not any(upload_dir.iterdir())


def test_create_requires_a_readable_image(auth_client):
    cat = _category(auth_client)
    r = auth_client.post(
        "/api/v1/product",
        data={"title": "Mug", "price": "3", "category_ids": [cat]},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Please provide a valid image file"

    r = auth_client.post(
        "/api/v1/product",
        data={"title": "Mug", "price": "3", "category_ids": [cat]},
        files={"image": ("mug.png", b"not an image", "image/png")},
    )
    assert r.status_code == 400
    assert r.json()["message"].startswith("Could not read image")


def test_small_images_are_not_upscaled(auth_client, upload_dir):
    out = BytesIO()
    Image.new("RGBA", (200, 100), (0, 0, 255, 128)).save(out, format="PNG")
    r = _create(auth_client, out.getvalue())
    assert r.status_code == 201, r.text
    with Image.open(upload_dir / r.json()["data"]["image"]) as img:
        assert img.size == (200, 100)
        assert img.mode == "RGB"


def test_list_paginates(auth_client, png_bytes):
    cat = _category(auth_client)
    for title in ("One", "Two", "Three"):
        _create(auth_client, png_bytes, title=title, category_ids=[cat])

    page = auth_client.get("/api/v1/product", params={"page": 2, "limit": 2}).json()["data"]
    assert page["total"] == 3
    assert page["total_pages"] == 2
    assert page["current_page"] == 2
    assert len(page["products"]) == 1


def test_get_search_and_counts(auth_client, png_bytes):
    cat = _category(auth_client)
    _create(auth_client, png_bytes, title="Blue Mug", category_ids=[cat])
    _create(auth_client, png_bytes, title="Red Plate", category_ids=[cat])

    assert auth_client.get("/api/v1/product/blue-mug").json()["data"]["title"] == "blue mug"
    assert auth_client.get("/api/v1/product/nope").status_code == 404

    found = auth_client.get("/api/v1/product/search", params={"q": "MUG"}).json()["data"]
    assert [p["slug"] for p in found] == ["blue-mug"]
    assert auth_client.get("/api/v1/product/search").status_code == 400

    assert auth_client.get("/api/v1/product/product-length").json()["data"] == 2
    assert auth_client.get("/api/v1/product/length-date").json()["data"]["count"] == 2


def test_update_regenerates_slug_only_when_title_changes(auth_client, png_bytes):
    _create(auth_client, png_bytes)

    r = auth_client.put("/api/v1/product/blue-mug", data={"price": "20"})
    assert r.status_code == 200
    assert r.json()["data"]["slug"] == "blue-mug"
    assert r.json()["data"]["price"] == 20.0

    r = auth_client.put("/api/v1/product/blue-mug", data={"title": "Blue Mug"})
    assert r.json()["data"]["slug"] == "blue-mug"

    r = auth_client.put("/api/v1/product/blue-mug", data={"title": "Green Mug"})
    assert r.json()["data"]["slug"] == "green-mug"
    assert auth_client.get("/api/v1/product/blue-mug").status_code == 404


def test_update_replaces_image_and_categories(auth_client, png_bytes, upload_dir):
    mugs = _category(auth_client, "Mugs")
    gifts = _category(auth_client, "Gifts")
    old_image = _create(auth_client, png_bytes, category_ids=[mugs]).json()["data"]["image"]

    r = auth_client.put(
        "/api/v1/product/blue-mug",
        data={"category_ids": [mugs, gifts]},
        files={"image": ("new.png", png_bytes, "image/png")},
    )
    assert r.status_code == 200, r.text
    product = r.json()["data"]
    assert sorted(c["name"] for c in product["categories"]) == ["gifts", "mugs"]
    assert product["image"].endswith("-new.png")
    assert (upload_dir / product["image"]).exists()
    assert not (upload_dir / old_image).exists()


def test_only_the_owner_may_update_or_delete(client, png_bytes):
    register(client)
    login(client)
    _create(client, png_bytes)

    register(client, name="Bob", email="bob@example.com")
    login(client, email="bob@example.com")
    r = client.put("/api/v1/product/blue-mug", data={"price": "1"})
    assert r.status_code == 403
    assert r.json()["message"] == "You are not authorized to update this product"
    assert client.delete("/api/v1/product/blue-mug").status_code == 403


def test_delete_removes_row_and_image(auth_client, png_bytes, upload_dir):
    image = _create(auth_client, png_bytes).json()["data"]["image"]
    r = auth_client.delete("/api/v1/product/blue-mug")
    assert r.status_code == 200
    assert auth_client.get("/api/v1/product/blue-mug").status_code == 404
    assert not (upload_dir / image).exists()


def test_delete_survives_a_missing_image_file(auth_client, png_bytes, upload_dir):
    image = _create(auth_client, png_bytes).json()["data"]["image"]
    (upload_dir / image).unlink()
    assert auth_client.delete("/api/v1/product/blue-mug").status_code == 200


def test_product_and_lead_may_share_a_slug(auth_client, png_bytes):
    _create(auth_client, png_bytes, title="Acme Corp")
    r = auth_client.post(
        "/api/v1/leads",
        json={"name": "Acme Corp", "email": "hi@acme.test", "message": "call me"},
    )
    assert r.json()["data"]["slug"] == "acme-corp"


def test_oversized_image_is_rejected_with_413(auth_client, png_bytes, upload_dir, monkeypatch):
    monkeypatch.setattr(service.settings, "MAX_UPLOAD_BYTES", 10)
    r = _create(auth_client, png_bytes)
    assert r.status_code == 413
    assert r.json() == {"success": False, "message": "Image too large (max 10 bytes)"}
    assert not upload_dir.exists() or not any(upload_dir.iterdir())


def _seed_owner_and_category(db):
    db.add(User(id="usr_owner", name="Owner", email="owner@example.com", password_hash="x"))
    db.add(Category(id="cat_widgets", name="widgets"))
    db.commit()


def _create_widget(db, png_bytes):
    return service.create_product(
        db,
        owner_id="usr_owner",
        title="Widget",
        description="",
        price=5,
        category_ids=["cat_widgets"],
        image=service.ImageUpload(filename="widget.png", raw=png_bytes),
    )


def test_product_slug_race_retries_once_with_a_fresh_slug(db, png_bytes, upload_dir, monkeypatch):
    _seed_owner_and_category(db)
    _create_widget(db, png_bytes)

    real_exists = service.slug_exists
    calls = {"n": 0}

    def stale_exists(session, slug):
        # the first lookup misses the row a concurrent request just inserted
        calls["n"] += 1
        return False if calls["n"] == 1 else real_exists(session, slug)

    monkeypatch.setattr(service, "slug_exists", stale_exists)
    product = _create_widget(db, png_bytes)
    assert product.slug == "widget-1"
    assert db.query(Product).count() == 2
    assert len(list(upload_dir.iterdir())) == 2


def test_failed_insert_removes_the_stored_image(db, png_bytes, upload_dir, monkeypatch):
    _seed_owner_and_category(db)
    _create_widget(db, png_bytes)
    before = set(upload_dir.iterdir())

    monkeypatch.setattr(service, "slug_exists", lambda session, slug: False)
    with pytest.raises(Conflict):
        _create_widget(db, png_bytes)

    assert set(upload_dir.iterdir()) == before
    assert db.query(Product).count() == 1
