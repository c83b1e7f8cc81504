SYSTEM_TAG = "Health"

SYSTEM_ROUTES = {
    "root": "/",
    "health": "/health",
    "keep_alive": "/api/keep-alive",
}
