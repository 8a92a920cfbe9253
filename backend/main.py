import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.auth.guard import RouteGuardMiddleware
from backend.core import config
from backend.database import init_schema
from backend.routes import auth_routes

config.validate_runtime_config()

app = FastAPI()

app.add_middleware(RouteGuardMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        init_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get(config.ENTRY_PATH)
def root():
    return {'status': 'School Portal API Running'}


app.include_router(auth_routes.router, prefix='/api/auth')
