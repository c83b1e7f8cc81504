TASK_PREFIX = "/api/v1/tasks"
TASK_TAG = "Tasks"

TASK_ROUTES = {
    "create": "",
    "list": "",
    "my_tasks": "/my-tasks",
    "unassigned": "/unassigned",
    "get": "/{task_id}",
    "update": "/{task_id}",
    "delete": "/{task_id}",
    "assign_users": "/{task_id}/assignees",
    "update_status": "/{task_id}/status",
    "pause": "/{task_id}/pause",
    "resume": "/{task_id}/resume",
}

DASHBOARD_PREFIX = "/api/v1/dashboard"
DASHBOARD_TAG = "Dashboard"


# ────────────────────────────────────────────────────────────────
# PAGE PATHS (cache revalidation)
# ────────────────────────────────────────────────────────────────

def task_page_path(task_id: int) -> str:
    return f"/tasks/{task_id}"
