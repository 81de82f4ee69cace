#!/usr/bin/env python3
"""
Crear usuarios que pueden registrar ventas.

Uso: python -m scripts.seed_users vendedor1:vendedor1@example.com ...
"""

import sys
import logging

from app.config.database import SessionLocal, init_db
from app.core.logging import setup_logging
from app.shared.database.models import User

logger = logging.getLogger(__name__)

DEFAULT_USERS = [("admin", "admin@example.com")]

def seed_users(users):
    init_db()
    db = SessionLocal()
    try:
        for username, email in users:
            existing = db.query(User).filter(User.username == username).first()
            if existing:
                logger.info(f"Usuario {username} ya existe (id={existing.id})")
                continue
            user = User(username=username, email=email)
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"Usuario {username} creado (id={user.id})")
    finally:
        db.close()

if __name__ == "__main__":
    setup_logging()
    args = sys.argv[1:]
    users = [tuple(arg.split(":", 1)) for arg in args] if args else DEFAULT_USERS
    seed_users(users)
