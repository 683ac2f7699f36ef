# nocturne/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from nocturne import config


def make_engine(url: str | None = None):
    url = url or config.DATABASE_URL
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
