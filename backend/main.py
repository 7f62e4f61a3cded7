import logging
import os

import stripe
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.database import Base, engine
from backend.models import book, category, user  # noqa: F401 registers tables
from backend.routes import auth_routes, book_routes, category_routes, checkout_routes

logging.basicConfig(level=config.LOG_LEVEL)
config.validate_runtime_config()

app = FastAPI(title='Bookshop API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials='*' not in config.CORS_ORIGINS,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(stripe.StripeError)
async def stripe_error_handler(request: Request, exc: stripe.StripeError) -> JSONResponse:
    logger.exception('Stripe request failed for %s', request.url.path, exc_info=exc)
    return JSONResponse(status_code=502, content={'detail': 'Payment provider request failed.'})


@app.get('/')
def root():
    return {'status': 'Bookshop API Running'}


app.include_router(auth_routes.router, prefix='/api/Auth')
app.include_router(book_routes.router, prefix='/api/Books')
app.include_router(category_routes.router, prefix='/api/Categories')
app.include_router(checkout_routes.router, prefix='/api/Checkout')

os.makedirs(config.UPLOADS_DIR, exist_ok=True)
app.mount('/uploads', StaticFiles(directory=config.UPLOADS_DIR), name='uploads')
