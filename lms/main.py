import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from lms.api.routes import assignments, enrollment, progress, resources
from lms.core.config import settings
from lms.core.errors import CodedHTTPException, coded_exception_handler
from lms.core.logging_config import setup_logging
from lms.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from lms.core.rate_limit import limiter
from lms.db.database import Base, engine
import lms.models  # noqa: F401  (register tables on Base.metadata)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started | environment={settings.environment}")
    yield
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(CodedHTTPException, coded_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resources.router, prefix="/api")
app.include_router(assignments.router, prefix="/api")
app.include_router(progress.router, prefix="/api")
app.include_router(enrollment.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "healthy"}
