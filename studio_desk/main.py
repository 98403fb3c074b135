import logging

from fastapi import FastAPI

from studio_desk.api.v1.admin import router as admin_router
from studio_desk.api.v1.booking import router as booking_router
from studio_desk.api.v1.calendar import router as calendar_router
from studio_desk.api.v1.chat import router as chat_router
from studio_desk.api.v1.classes import router as classes_router
from studio_desk.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "status", "action", "weekday", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Dance Studio Desk", version="1.0.0")

app.include_router(chat_router, tags=["chat"])
app.include_router(booking_router, tags=["booking"])
app.include_router(calendar_router, tags=["calendar"])
app.include_router(classes_router, tags=["classes"])
app.include_router(admin_router, tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
