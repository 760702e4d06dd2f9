from contextlib import asynccontextmanager

from beanie import init_beanie
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from echocatering.api.v1.configs.config import MONGODB_URL, settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.routers import router
from echocatering.api.v1.endpoints.user_endpoints.core_functions import ensure_admin_user
from echocatering.api.v1.errors import APIError, api_error_handler
from echocatering.models.models.catering_events import CateringEventBeanie
from echocatering.models.models.cocktails import CocktailBeanie
from echocatering.models.models.content import ContentBeanie
from echocatering.models.models.gallery import GalleryBeanie
from echocatering.models.models.pos_events import PosEventBeanie
from echocatering.models.models.sales import SaleBeanie
from echocatering.models.models.users import UserBeanie
from echocatering.version import get_api_version, get_version

DOCUMENT_MODELS = [
    SaleBeanie,
    CateringEventBeanie,
    CocktailBeanie,
    ContentBeanie,
    GalleryBeanie,
    PosEventBeanie,
    UserBeanie,
]


# Database initialization
async def init_motor_beanie():
    client = AsyncIOMotorClient(MONGODB_URL)
    await init_beanie(database=client[settings.mongodb.db_name], document_models=DOCUMENT_MODELS)
    logger.info(f"Connected to MongoDB database {settings.mongodb.db_name}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_motor_beanie()
    await ensure_admin_user()
    yield


app = FastAPI(
    title="ECHO Catering API",
    version=get_version(),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.fastapi.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_version = get_api_version()
api_prefix = f"/api/{api_version}"
app.include_router(router, prefix=api_prefix)

app.add_exception_handler(APIError, api_error_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    _ = request
    return JSONResponse(status_code=422, content={"detail": [str(error) for error in exc.errors()]})


@app.get(f"{api_prefix}/health")
async def health():
    return {"status": "OK", "version": get_version()}
