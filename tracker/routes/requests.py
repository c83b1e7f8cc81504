REQUEST_PREFIX = "/api/v1"
REQUEST_TAG = "Assignment Requests"

REQUEST_ROUTES = {
    "create": "/tasks/{task_id}/assignment-requests",
    "mine": "/assignment-requests/mine",
    "pending": "/admin/requests",
    "review": "/admin/requests/{request_id}/review",
}
