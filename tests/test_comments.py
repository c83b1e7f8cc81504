import re

import pytest

from tracker.modules import Notification, NotificationType, TaskComment, TaskStatus
from tracker.modules.comments.service import quote

from .conftest import auth_headers

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def _comment_url(task_id):
    return f"/api/v1/tasks/{task_id}/comments"


def test_add_comment_without_image(client, db, user, make_task):
    task = make_task(status=TaskStatus.PENDING, assignees=(user,))

    response = client.post(_comment_url(task.id), headers=auth_headers(user), data={"content": "Started on it"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["content"] == "Started on it"
    assert data["image_url"] is None
    assert data["user"]["id"] == user.id


def test_add_comment_with_image_uploads_to_bucket(client, storage, user, make_task):
    task = make_task()

    response = client.post(
        _comment_url(task.id),
        headers=auth_headers(user),
        data={"content": "Screenshot attached"},
        files={"image": ("shot.png", PNG, "image/png")},
    )

    assert response.status_code == 201
    url = response.json()["data"]["image_url"]
    path = storage.path_from_url(url)
    assert url.startswith("http://storage.test/comment-images/")
    assert re.fullmatch(rf"{user.id}/\d+-[0-9a-f]+\.png", path)
    assert storage.objects[path] == (PNG, "image/png")


@pytest.mark.parametrize(
    "filename, payload, content_type",
    [
        ("notes.pdf", b"%PDF-1.4", "application/pdf"),
        ("huge.png", b"0" * (5 * 1024 * 1024 + 1), "image/png"),
    ],
)
def test_invalid_image_rejected_and_nothing_stored(client, db, storage, user, make_task, filename, payload, content_type):
    task = make_task()

    response = client.post(
        _comment_url(task.id),
        headers=auth_headers(user),
        data={"content": "See attachment"},
        files={"image": (filename, payload, content_type)},
    )

    assert response.status_code == 400
    assert storage.objects == {}
    assert db.query(TaskComment).count() == 0


def test_empty_file_is_treated_as_no_image(client, storage, user, make_task):
    task = make_task()

    response = client.post(
        _comment_url(task.id),
        headers=auth_headers(user),
        data={"content": "Forgot the file"},
        files={"image": ("empty.png", b"", "image/png")},
    )

    assert response.status_code == 201
    assert response.json()["data"]["image_url"] is None
    assert storage.objects == {}


def test_admin_comment_notifies_assignees_except_author(client, db, admin, user, make_user, make_task):
    other = make_user(first_name="Cleo")
    task = make_task(title="Parser", status=TaskStatus.PENDING, assignees=(user, other, admin))
    content = "x" * 150

    response = client.post(_comment_url(task.id), headers=auth_headers(admin), data={"content": content})

    assert response.status_code == 201
    comment_id = response.json()["data"]["id"]
    notes = db.query(Notification).all()
    assert sorted(n.user_id for n in notes) == sorted([user.id, other.id])
    note = notes[0]
    assert note.type == NotificationType.TASK_COMMENT
    assert note.title == "New comment on: Parser"
    assert note.message == f'Ada Admin commented: "{"x" * 100}..."'
    assert note.task_comment_id == comment_id


def test_user_comment_creates_no_notifications(client, db, user, make_user, make_task):
    other = make_user()
    task = make_task(status=TaskStatus.PENDING, assignees=(user, other))

    client.post(_comment_url(task.id), headers=auth_headers(user), data={"content": "hi"})

    assert db.query(Notification).count() == 0


def test_quote_truncates_long_content():
    assert quote("short") == "short"
    assert quote("a" * 100) == "a" * 100
    assert quote("a" * 101) == "a" * 100 + "..."


def _create_with_image(client, user, task):
    response = client.post(
        _comment_url(task.id),
        headers=auth_headers(user),
        data={"content": "with image"},
        files={"image": ("a.png", PNG, "image/png")},
    )
    return response.json()["data"]


def test_delete_comment_removes_stored_image(client, db, storage, user, make_task):
    task = make_task()
    comment = _create_with_image(client, user, task)
    path = storage.path_from_url(comment["image_url"])

    response = client.delete(f"/api/v1/comments/{comment['id']}", headers=auth_headers(user))

    assert response.status_code == 200
    assert storage.removed == [path]
    assert db.query(TaskComment).count() == 0


def test_delete_comment_survives_storage_failure(client, db, storage, user, make_task):
    task = make_task()
    comment = _create_with_image(client, user, task)
    storage.fail_remove = True

    response = client.delete(f"/api/v1/comments/{comment['id']}", headers=auth_headers(user))

    assert response.status_code == 200
    assert db.query(TaskComment).count() == 0


def test_only_owner_can_edit_or_delete(client, user, make_user, make_task):
    task = make_task()
    stranger = make_user()
    comment = client.post(_comment_url(task.id), headers=auth_headers(user), data={"content": "mine"}).json()["data"]

    edit = client.patch(f"/api/v1/comments/{comment['id']}", headers=auth_headers(stranger), data={"content": "hacked"})
    delete = client.delete(f"/api/v1/comments/{comment['id']}", headers=auth_headers(stranger))

    assert edit.status_code == 403
    assert delete.status_code == 403


def test_update_replaces_image_and_deletes_previous(client, storage, user, make_task):
    task = make_task()
    comment = _create_with_image(client, user, task)
    old_path = storage.path_from_url(comment["image_url"])

    response = client.patch(
        f"/api/v1/comments/{comment['id']}",
        headers=auth_headers(user),
        data={"content": "new image"},
        files={"image": ("b.gif", b"GIF89a", "image/gif")},
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["content"] == "new image"
    assert data["image_url"].endswith(".gif")
    assert storage.removed == [old_path]


def test_update_remove_image_clears_url(client, storage, user, make_task):
    task = make_task()
    comment = _create_with_image(client, user, task)

    response = client.patch(
        f"/api/v1/comments/{comment['id']}",
        headers=auth_headers(user),
        data={"content": "no image", "remove_image": "true"},
    )

    assert response.json()["data"]["image_url"] is None
    assert storage.objects == {}


def test_comment_on_missing_task_is_404(client, user):
    response = client.post(_comment_url(999), headers=auth_headers(user), data={"content": "hello"})

    assert response.status_code == 404


def test_remove_image_survives_storage_failure(client, storage, user, make_task):
    task = make_task()
    comment = _create_with_image(client, user, task)
    storage.fail_remove = True

    response = client.patch(
        f"/api/v1/comments/{comment['id']}",
        headers=auth_headers(user),
        data={"content": "no image", "remove_image": "true"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["image_url"] is None
