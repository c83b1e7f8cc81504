ADMIN_PREFIX = "/api/v1/admin"
ADMIN_TAG = "Admin"

ADMIN_ROUTES = {
    "metrics": "/metrics",
    "users": "/users",
}
