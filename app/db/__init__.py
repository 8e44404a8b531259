# app/db/__init__.py
# Importing app.db registers every model on Base.metadata

from app.db.base import Base
from app.db import models  # noqa: F401

__all__ = ["Base"]
