from tracker.modules import DocumentationPage, DocumentationSection

from .conftest import auth_headers

ADMIN_DOCS = "/api/v1/admin/documentation"


def _section(client, admin, title, slug, order=0):
    response = client.post(
        f"{ADMIN_DOCS}/sections",
        headers=auth_headers(admin),
        json={"title": title, "slug": slug, "order": order},
    )
    return response


def _page(client, admin, section_id, title, content="# Heading"):
    response = client.post(
        f"{ADMIN_DOCS}/pages",
        headers=auth_headers(admin),
        json={"section_id": section_id, "title": title, "content": content},
    )
    return response.json()["data"]


def test_create_section_and_duplicate_slug(client, admin):
    assert _section(client, admin, "Getting Started", "getting-started").status_code == 201

    duplicate = _section(client, admin, "Again", "getting-started")

    assert duplicate.status_code == 400


def test_slug_must_be_lowercase_hyphenated(client, admin):
    assert _section(client, admin, "Bad", "Bad Slug").status_code == 422
    assert _section(client, admin, "Bad", "trailing-").status_code == 422


def test_page_order_appends_to_section(client, admin):
    section = _section(client, admin, "Guide", "guide").json()["data"]

    first = _page(client, admin, section["id"], "Intro")
    second = _page(client, admin, section["id"], "Setup")

    assert first["order"] == 0
    assert second["order"] == 1


def test_reorder_pages_writes_sequential_order(client, db, admin):
    section = _section(client, admin, "Guide", "guide").json()["data"]
    a = _page(client, admin, section["id"], "A")
    b = _page(client, admin, section["id"], "B")
    c = _page(client, admin, section["id"], "C")

    response = client.put(f"{ADMIN_DOCS}/pages/reorder", headers=auth_headers(admin), json={"ids": [c["id"], a["id"], b["id"]]})

    assert response.status_code == 200
    db.expire_all()
    pages = db.query(DocumentationPage).order_by(DocumentationPage.order).all()
    assert [(p.title, p.order) for p in pages] == [("C", 0), ("A", 1), ("B", 2)]


def test_reorder_sections_and_unknown_id(client, db, admin):
    s1 = _section(client, admin, "One", "one").json()["data"]
    s2 = _section(client, admin, "Two", "two", order=5).json()["data"]

    ok = client.put(f"{ADMIN_DOCS}/sections/reorder", headers=auth_headers(admin), json={"ids": [s2["id"], s1["id"]]})
    missing = client.put(f"{ADMIN_DOCS}/sections/reorder", headers=auth_headers(admin), json={"ids": [s1["id"], 999]})

    assert ok.status_code == 200
    assert missing.status_code == 404
    db.expire_all()
    assert [(s.slug, s.order) for s in db.query(DocumentationSection).order_by(DocumentationSection.order)] == [
        ("two", 0),
        ("one", 1),
    ]


def test_reorder_rejects_duplicate_ids(client, db, admin):
    a = _section(client, admin, "A", "a").json()["data"]
    b = _section(client, admin, "B", "b", order=1).json()["data"]

    response = client.put(
        f"{ADMIN_DOCS}/sections/reorder",
        headers=auth_headers(admin),
        json={"ids": [a["id"], b["id"], a["id"]]},
    )

    assert response.status_code == 400
    db.expire_all()
    assert [(s.slug, s.order) for s in db.query(DocumentationSection).order_by(DocumentationSection.order)] == [
        ("a", 0),
        ("b", 1),
    ]


def test_reorder_pages_stays_within_one_section(client, db, admin):
    s1 = _section(client, admin, "One", "one").json()["data"]
    s2 = _section(client, admin, "Two", "two").json()["data"]
    first = _page(client, admin, s1["id"], "First")
    other = _page(client, admin, s2["id"], "Other")

    response = client.put(
        f"{ADMIN_DOCS}/pages/reorder",
        headers=auth_headers(admin),
        json={"ids": [other["id"], first["id"]]},
    )

    assert response.status_code == 400
    db.expire_all()
    assert {p.title: p.order for p in db.query(DocumentationPage)} == {"First": 0, "Other": 0}


def test_viewer_pages(client, admin, user):
    section = _section(client, admin, "Guide", "guide").json()["data"]
    page = _page(client, admin, section["id"], "Intro", content="Hello **world**")

    index = client.get("/api/v1/docs", headers=auth_headers(user)).json()["data"]
    assert index[0]["slug"] == "guide"
    assert index[0]["pages"][0]["title"] == "Intro"

    by_slug = client.get("/api/v1/docs/guide", headers=auth_headers(user)).json()["data"]
    assert by_slug["pages"][0]["content"] == "Hello **world**"

    single = client.get(f"/api/v1/docs/guide/{page['id']}", headers=auth_headers(user)).json()["data"]
    assert single["section"]["slug"] == "guide"
    assert single["content"] == "Hello **world**"


def test_viewer_404s(client, admin, user):
    section = _section(client, admin, "Guide", "guide").json()["data"]
    page = _page(client, admin, section["id"], "Intro")
    _section(client, admin, "Other", "other")

    assert client.get("/api/v1/docs/missing", headers=auth_headers(user)).status_code == 404
    assert client.get(f"/api/v1/docs/other/{page['id']}", headers=auth_headers(user)).status_code == 404


def test_update_and_delete_section_cascades_pages(client, db, admin):
    section = _section(client, admin, "Guide", "guide").json()["data"]
    _page(client, admin, section["id"], "Intro")

    updated = client.patch(f"{ADMIN_DOCS}/sections/{section['id']}", headers=auth_headers(admin), json={"title": "Handbook"})
    assert updated.json()["data"]["title"] == "Handbook"

    deleted = client.delete(f"{ADMIN_DOCS}/sections/{section['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200
    assert db.query(DocumentationPage).count() == 0


def test_update_page_and_move_between_sections(client, admin):
    s1 = _section(client, admin, "One", "one").json()["data"]
    s2 = _section(client, admin, "Two", "two").json()["data"]
    _page(client, admin, s2["id"], "Existing")
    page = _page(client, admin, s1["id"], "Mover")

    response = client.patch(
        f"{ADMIN_DOCS}/pages/{page['id']}",
        headers=auth_headers(admin),
        json={"section_id": s2["id"], "content": "moved"},
    )

    data = response.json()["data"]
    assert data["section_id"] == s2["id"]
    assert data["order"] == 1
    assert data["content"] == "moved"


def test_admin_documentation_requires_admin(client, user):
    assert client.get(ADMIN_DOCS, headers=auth_headers(user)).status_code == 403
    assert _section(client, user, "Nope", "nope").status_code == 403
