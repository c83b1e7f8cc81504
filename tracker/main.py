from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from tracker.modules.auth.api import router as auth_router
from tracker.modules.tasks.api import router as tasks_router, dashboard_router
from tracker.modules.comments.api import router as comments_router
from tracker.modules.requests.api import router as requests_router
from tracker.modules.notifications.api import router as notifications_router
from tracker.modules.docs.api import router as docs_router
from tracker.modules.admin.api import router as admin_router
from tracker.modules.system.api import router as system_router
from tracker.core.config import settings
from tracker.core.response import http_exception_handler, validation_exception_handler

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,            # session cookie
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Register global exception handlers ────────────────────────────
# 404, 422, 500 etc all return the unified response format
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# ── Routers ───────────────────────────────────────────────────────
app.include_router(system_router)
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(tasks_router)
app.include_router(comments_router)
app.include_router(requests_router)
app.include_router(notifications_router)
app.include_router(docs_router)
app.include_router(admin_router)
