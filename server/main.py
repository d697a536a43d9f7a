import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from server.config import config
from server.database import engine, Base
from server.routes import router
from server.routes.prometheus import metrics_middleware
from server.services import build_services, start_background, stop_background

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# =========================================================
# FASTAPI APP
# =========================================================

app = FastAPI(title="Tugas-Ku Reminder API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Prometheus middleware
app.middleware("http")(metrics_middleware)

# Include API Router
app.include_router(router)

# =========================================================
# STARTUP / SHUTDOWN
# =========================================================
@app.on_event("startup")
def init_database():
    import server.models  # noqa: F401  registers tables on Base
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables ready")


@app.on_event("startup")
def init_services():
    build_services(app.state)
    if config.START_BACKGROUND:
        start_background(app.state)


@app.on_event("shutdown")
def shutdown_services():
    stop_background(app.state)
