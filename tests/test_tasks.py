from tracker.modules import LinkType, Notification, NotificationType, Task, TaskAssignment, TaskLink, TaskStatus

from .conftest import auth_headers

TASKS = "/api/v1/tasks"


def _assignee_ids(db, task_id):
    db.expire_all()
    return sorted(a.user_id for a in db.query(TaskAssignment).filter(TaskAssignment.task_id == task_id))


# ================================================================
# CREATE / UPDATE / DELETE
# ================================================================

def test_admin_creates_unassigned_task_with_valid_links(client, db, admin):
    response = client.post(TASKS, headers=auth_headers(admin), json={
        "title": "Plugin loader",
        "description": "Load plugins from disk",
        "links": [
            {"link_type": "plugins", "name": "Loader", "url": "https://example.com/loader"},
            {"link_type": "tutorials", "name": "", "url": "https://example.com/empty-name"},
        ],
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "unassigned"
    assert data["created_by"] == admin.id

    links = db.query(TaskLink).filter(TaskLink.task_id == data["id"]).all()
    assert [link.name for link in links] == ["Loader"]


def test_non_admin_cannot_create_task(client, user):
    response = client.post(TASKS, headers=auth_headers(user), json={"title": "Nope"})

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


def test_update_replaces_links_only_when_given(client, db, admin, make_task):
    task = make_task()
    db.add(TaskLink(task_id=task.id, link_type=LinkType.DOCUMENTATION, name="Old", url="https://old"))
    db.commit()

    client.patch(f"{TASKS}/{task.id}", headers=auth_headers(admin), json={"title": "Renamed"})
    db.expire_all()
    assert [link.name for link in db.query(TaskLink).filter(TaskLink.task_id == task.id)] == ["Old"]

    response = client.patch(f"{TASKS}/{task.id}", headers=auth_headers(admin), json={
        "links": [
            {"link_type": "tutorials", "name": "New", "url": "https://new"},
            {"link_type": "plugins", "name": "Half", "url": ""},
        ],
    })

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Renamed"
    db.expire_all()
    assert [link.name for link in db.query(TaskLink).filter(TaskLink.task_id == task.id)] == ["New"]


def test_delete_task_removes_assignments(client, db, admin, user, make_task):
    task = make_task(assignees=(user,))

    response = client.delete(f"{TASKS}/{task.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Task).count() == 0
    assert db.query(TaskAssignment).count() == 0


def test_missing_task_is_404(client, admin):
    response = client.get(f"{TASKS}/999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["success"] is False


# ================================================================
# ASSIGNMENT
# ================================================================

def test_assign_users_notifies_added_and_moves_unassigned_to_pending(client, db, admin, user, make_user, make_task):
    other = make_user(first_name="Cleo")
    task = make_task(title="Parser")

    response = client.put(
        f"{TASKS}/{task.id}/assignees",
        headers=auth_headers(admin),
        json={"user_ids": [user.id, other.id]},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "pending"
    assert _assignee_ids(db, task.id) == sorted([user.id, other.id])

    notes = db.query(Notification).order_by(Notification.user_id).all()
    assert len(notes) == 2
    assert {n.type for n in notes} == {NotificationType.TASK_ASSIGNMENT}
    assert notes[0].title == "New task assigned: Parser"
    assert notes[0].message == "Ada Admin assigned you a new task."
    assert notes[0].link == f"/tasks/{task.id}"


def test_removing_all_assignees_pauses_task(client, db, admin, make_user, make_task):
    # u1 and u2 assigned, admin replaces the set with []
    u1 = make_user(first_name="Uno")
    u2 = make_user(first_name="Dos")
    task = make_task(title="Shared", status=TaskStatus.IN_PROGRESS, assignees=(u1, u2))

    response = client.put(f"{TASKS}/{task.id}/assignees", headers=auth_headers(admin), json={"user_ids": []})

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Task, task.id).status == TaskStatus.PAUSED
    assert _assignee_ids(db, task.id) == []

    notes = db.query(Notification).all()
    assert sorted(n.user_id for n in notes) == sorted([u1.id, u2.id])
    assert all(n.type == NotificationType.TASK_UNASSIGNMENT for n in notes)
    assert notes[0].title == "Removed from task: Shared"
    assert notes[0].message == "Ada Admin removed you from this task."


def test_reassigning_same_set_sends_no_notifications(client, db, admin, user, make_task):
    task = make_task(status=TaskStatus.PENDING, assignees=(user,))

    client.put(f"{TASKS}/{task.id}/assignees", headers=auth_headers(admin), json={"user_ids": [user.id]})

    assert db.query(Notification).count() == 0
    assert _assignee_ids(db, task.id) == [user.id]


def test_assign_unknown_user_is_400(client, db, admin, make_task):
    task = make_task()

    response = client.put(f"{TASKS}/{task.id}/assignees", headers=auth_headers(admin), json={"user_ids": [4242]})

    assert response.status_code == 400
    assert _assignee_ids(db, task.id) == []


# ================================================================
# STATUS / PAUSE / RESUME
# ================================================================

def test_non_assignee_cannot_update_status(client, db, user, make_user, make_task):
    assignee = make_user(first_name="Owner")
    task = make_task(status=TaskStatus.PENDING, assignees=(assignee,))

    response = client.patch(f"{TASKS}/{task.id}/status", headers=auth_headers(user), json={"status": "completed"})

    assert response.status_code == 403
    assert response.json()["message"] == (
        "You are not authorized to update this task. "
        "Only assigned users and administrators can change its status."
    )
    db.expire_all()
    assert db.get(Task, task.id).status == TaskStatus.PENDING


def test_assignee_can_move_to_any_status(client, db, user, make_task):
    task = make_task(status=TaskStatus.COMPLETED, assignees=(user,))

    response = client.patch(f"{TASKS}/{task.id}/status", headers=auth_headers(user), json={"status": "unassigned"})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "unassigned"


def test_admin_can_update_status_without_assignment(client, admin, make_task):
    task = make_task()

    response = client.patch(f"{TASKS}/{task.id}/status", headers=auth_headers(admin), json={"status": "in_progress"})

    assert response.status_code == 200
    assert response.json()["data"]["status_label"] == "In Progress"


def test_pause_and_resume(client, db, user, make_task):
    task = make_task(status=TaskStatus.IN_PROGRESS, assignees=(user,))

    paused = client.post(f"{TASKS}/{task.id}/pause", headers=auth_headers(user), json={"reason": "Blocked on API"})

    assert paused.status_code == 200
    data = paused.json()["data"]
    assert data["status"] == "paused"
    assert data["paused_reason"] == "Blocked on API"
    assert data["paused_by"] == user.id
    assert data["paused_at"] is not None

    resumed = client.post(f"{TASKS}/{task.id}/resume", headers=auth_headers(user))

    data = resumed.json()["data"]
    assert data["status"] == "pending"
    assert data["paused_reason"] is None
    assert data["paused_by"] is None


def test_pause_by_outsider_forbidden(client, user, make_task):
    task = make_task(status=TaskStatus.PENDING)

    response = client.post(f"{TASKS}/{task.id}/pause", headers=auth_headers(user), json={"reason": "x"})

    assert response.status_code == 403


# ================================================================
# PAGES
# ================================================================

def test_task_lists(client, user, make_task):
    mine = make_task(title="Mine", status=TaskStatus.PENDING, assignees=(user,))
    free = make_task(title="Free")

    all_tasks = client.get(TASKS, headers=auth_headers(user)).json()
    assert {t["id"] for t in all_tasks["data"]} == {mine.id, free.id}
    assert all_tasks["meta"]["total"] == 2

    my_tasks = client.get(f"{TASKS}/my-tasks", headers=auth_headers(user)).json()["data"]
    assert [t["id"] for t in my_tasks] == [mine.id]
    assert my_tasks[0]["assignees"][0]["id"] == user.id

    unassigned = client.get(f"{TASKS}/unassigned", headers=auth_headers(user)).json()["data"]
    assert [t["id"] for t in unassigned] == [free.id]


def test_task_detail_for_user_and_admin(client, admin, user, make_task):
    task = make_task(title="Detail", status=TaskStatus.PENDING, assignees=(user,))

    as_user = client.get(f"{TASKS}/{task.id}", headers=auth_headers(user)).json()["data"]
    assert as_user["task"]["title"] == "Detail"
    assert as_user["is_assigned"] is True
    assert as_user["is_admin"] is False
    assert as_user["all_users"] is None
    assert as_user["pending_request_id"] is None

    as_admin = client.get(f"{TASKS}/{task.id}", headers=auth_headers(admin)).json()["data"]
    assert as_admin["is_assigned"] is False
    assert {u["id"] for u in as_admin["all_users"]} == {admin.id, user.id}


def test_dashboard_counts(client, user, make_task):
    make_task(title="Active", status=TaskStatus.IN_PROGRESS, assignees=(user,))
    make_task(title="Done", status=TaskStatus.COMPLETED, assignees=(user,))
    make_task(title="Open 1")
    make_task(title="Open 2")

    data = client.get("/api/v1/dashboard", headers=auth_headers(user)).json()["data"]

    assert data["stats"] == {
        "my_active_tasks": 1,
        "my_completed_tasks": 1,
        "unassigned_tasks": 2,
        "total_tasks": 4,
    }
    assert data["progress"]["completion_percentage"] == 25
    assert [t["title"] for t in data["recent_active_tasks"]] == ["Active"]
    assert len(data["recent_unassigned_tasks"]) == 2


def test_dashboard_on_empty_database(client, user):
    data = client.get("/api/v1/dashboard", headers=auth_headers(user)).json()["data"]

    assert data["progress"]["completion_percentage"] == 0
    assert data["recent_active_tasks"] == []


def test_single_assignee_removed_from_pending_task_pauses_it(client, db, admin, user, make_task):
    task = make_task(status=TaskStatus.PENDING, assignees=(user,))

    client.put(f"{TASKS}/{task.id}/assignees", headers=auth_headers(admin), json={"user_ids": []})

    assert _assignee_ids(db, task.id) == []
    assert db.get(Task, task.id).status == TaskStatus.PAUSED
