from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.system import service
from tracker.core.config import settings
from tracker.core.logger import logger
from tracker.routes.system import SYSTEM_ROUTES, SYSTEM_TAG

router = APIRouter(tags=[SYSTEM_TAG])


@router.get(SYSTEM_ROUTES["root"])
def root():
    return {"message": f"{settings.PROJECT_NAME} is running", "version": settings.VERSION}


@router.get(SYSTEM_ROUTES["health"])
def health():
    return {"status": "ok"}


@router.get(SYSTEM_ROUTES["keep_alive"])
def keep_alive(db: Session = Depends(get_db)):
    # Polled by an external cron; shape kept outside the success/error envelope
    try:
        timestamp = service.touch_keep_alive(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[KeepAlive] Ping failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {
        "success": True,
        "message": "Database pinged successfully",
        "timestamp": timestamp.isoformat(),
    }
