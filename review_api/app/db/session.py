from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request
from app.core.config import settings

def make_engine(url: str):
	connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
	kwargs = {}
	if url in ("sqlite://", "sqlite:///:memory:"):
		# One shared connection, otherwise every session sees an empty database
		kwargs["poolclass"] = StaticPool
	engine = create_engine(url, connect_args=connect_args, **kwargs)

	if engine.dialect.name == "sqlite":
		# Cascading deletes rely on foreign keys, which SQLite leaves off by default
		@event.listens_for(engine, "connect")
		def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
			cursor = dbapi_connection.cursor()
			cursor.execute("PRAGMA foreign_keys=ON")
			cursor.close()

	return engine

def make_session_factory(engine):
	return sessionmaker(autocommit=False, autoflush=False, bind=engine)

engine = make_engine(settings.DATABASE_URL)

SessionLocal = make_session_factory(engine)

def get_db(request: Request):
	db = request.app.state.session_factory()
	try:
		yield db
	finally:
		db.close()
