NOTIFICATION_PREFIX = "/api/v1/notifications"
NOTIFICATION_TAG = "Notifications"

NOTIFICATION_ROUTES = {
    "list": "",
    "counts": "/counts",
    "mark_read": "/{notification_id}/read",
    "mark_all_read": "/read-all",
}
