from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import request_id_middleware
from app.core.errors import (
	AppError,
	app_error_handler,
	validation_exception_handler,
	http_exception_handler,
	database_error_handler,
	unhandled_exception_handler,
)
from app.db.session import engine as default_engine, make_session_factory
from app.db.base import Base
from app.db.seed import seed_catalog

from app.routers.auth import router as auth_router
from app.routers.items import router as items_router
from app.routers.reviews import router as reviews_router
from app.routers.comments import router as comments_router


def seed_items(session_factory) -> None:
	db = session_factory()
	try:
		seed_catalog(db)
	finally:
		db.close()

def create_app(engine=None, seed: bool | None = None) -> FastAPI:
	if not settings.JWT_SECRET:
		raise RuntimeError("JWT_SECRET must be defined in the environment or .env file")

	engine = engine if engine is not None else default_engine
	seed = settings.SEED_CATALOG if seed is None else seed

	app = FastAPI(title=settings.APP_NAME)
	app.state.session_factory = make_session_factory(engine)

	# DB init
	Base.metadata.create_all(bind=engine)
	if seed:
		seed_items(app.state.session_factory)

	# Middleware
	app.middleware("http")(request_id_middleware)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.ALLOW_ORIGINS,
		allow_credentials="*" not in settings.ALLOW_ORIGINS,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	# Every error goes out in the same envelope
	app.add_exception_handler(AppError, app_error_handler)
	app.add_exception_handler(RequestValidationError, validation_exception_handler)
	app.add_exception_handler(StarletteHTTPException, http_exception_handler)
	app.add_exception_handler(SQLAlchemyError, database_error_handler)
	app.add_exception_handler(Exception, unhandled_exception_handler)

	# Routers
	prefix = settings.API_PREFIX
	app.include_router(auth_router, prefix=prefix)
	app.include_router(items_router, prefix=prefix)
	app.include_router(reviews_router, prefix=prefix)
	app.include_router(comments_router, prefix=prefix)

	@app.get("/health")
	def health():
		return {"status": "OK"}

	return app

app = create_app()

if __name__ == "__main__":
	import uvicorn
	uvicorn.run(app, host="0.0.0.0", port=8000)
