from tracker.modules import TaskStatus
from tracker.modules.admin.service import completion_rate

from .conftest import auth_headers


def test_metrics_per_user_ordered_by_first_name(client, admin, make_user, make_task):
    zed = make_user(first_name="Zed")
    amy = make_user(first_name="Amy")
    make_task(status=TaskStatus.COMPLETED, assignees=(zed, amy))
    make_task(status=TaskStatus.IN_PROGRESS, assignees=(zed,))
    make_task(status=TaskStatus.PENDING, assignees=(zed,))

    response = client.get("/api/v1/admin/metrics", headers=auth_headers(admin))

    assert response.status_code == 200
    rows = response.json()["data"]
    assert [r["name"].split()[0] for r in rows] == ["Ada", "Amy", "Zed"]

    by_id = {r["id"]: r for r in rows}
    assert by_id[zed.id] == {
        "id": zed.id,
        "name": zed.full_name,
        "email": zed.email,
        "role": "user",
        "total_tasks": 3,
        "completed_tasks": 1,
        "in_progress_tasks": 1,
        "pending_tasks": 1,
        "completion_rate": 33,
    }
    assert by_id[amy.id]["completion_rate"] == 100
    assert by_id[admin.id]["total_tasks"] == 0
    assert by_id[admin.id]["completion_rate"] == 0


def test_completion_rate_rounds():
    assert completion_rate(2, 3) == 67
    assert completion_rate(0, 0) == 0


def test_metrics_and_users_require_admin(client, user):
    assert client.get("/api/v1/admin/metrics", headers=auth_headers(user)).status_code == 403
    assert client.get("/api/v1/admin/users", headers=auth_headers(user)).status_code == 403


def test_users_list(client, admin, user):
    data = client.get("/api/v1/admin/users", headers=auth_headers(admin)).json()["data"]

    assert [u["email"] for u in data] == [admin.email, user.email]
