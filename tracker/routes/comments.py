COMMENT_PREFIX = "/api/v1"
COMMENT_TAG = "Comments"

COMMENT_ROUTES = {
    "create": "/tasks/{task_id}/comments",
    "update": "/comments/{comment_id}",
    "delete": "/comments/{comment_id}",
}
