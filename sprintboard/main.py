import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sprintboard.api.v1.router import api_router
from sprintboard.cache.client import close_cache
from sprintboard.core.config import settings
from sprintboard.core.exceptions import ServiceError
from sprintboard.messaging.consumers import start_consumers
from sprintboard.messaging.producers import close_kafka_producer, create_topics

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    consumers_task = None
    if not settings.TESTING:
        await create_topics()
        consumers_task = asyncio.create_task(start_consumers())
    yield
    if consumers_task is not None:
        consumers_task.cancel()
        with suppress(asyncio.CancelledError):
            await consumers_task
    await close_kafka_producer()
    await close_cache()


app = FastAPI(title=settings.PROJECT_NAME, openapi_url=f"{settings.API_V1_STR}/openapi.json", lifespan=lifespan)

# Set CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=int(exc.status_code), content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Ошибка хранилища никогда не превращается в отказ в доступе
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": "Welcome to Sprintboard"}
