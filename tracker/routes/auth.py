AUTH_ROUTES = {
    "register":       "/register",
    "login":          "/login",
    "refresh":        "/refresh",
    "logout":         "/logout",
    "profile":        "/profile",
}

AUTH_PREFIX = "/api/auth"
AUTH_TAG    = "Auth"
