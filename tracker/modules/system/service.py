from datetime import datetime, timezone
from sqlalchemy.orm import Session
from tracker.modules.system.model import KeepAlive

KEEP_ALIVE_ROW_ID = 1


def touch_keep_alive(db: Session) -> datetime:
    """Update the sentinel row's last_ping, creating it on first use."""
    now = datetime.now(timezone.utc)
    row = db.query(KeepAlive).filter(KeepAlive.id == KEEP_ALIVE_ROW_ID).first()
    if row is None:
        row = KeepAlive(id=KEEP_ALIVE_ROW_ID, last_ping=now)
        db.add(row)
    else:
        row.last_ping = now
    db.commit()
    return now
