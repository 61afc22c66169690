import logging
import os
from pathlib import Path

from dotenv import load_dotenv

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from handlers.editor_handler import router as editor_router
from handlers.health_handler import router as health_router

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
EDITOR_LOG_FILE = os.getenv("EDITOR_LOG_FILE", "").strip()

log_handlers: list[logging.Handler] = [logging.StreamHandler()]
if EDITOR_LOG_FILE:
    log_path = Path(EDITOR_LOG_FILE)
    if not log_path.is_absolute():
        log_path = ROOT_DIR / log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=log_handlers,
)

app = FastAPI(title="Clip Editor Timeline Backend")

app.include_router(health_router)
app.include_router(editor_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:4173",
        "http://localhost:5173",
        "http://localhost:5174",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
