"""Transactional unit helper.

Wraps a block of session work so it is visible to other connections only
in its fully-applied form: the block commits on normal exit and rolls back
every statement issued inside it when any exception escapes.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from perfin.extensions import db


@contextmanager
def atomic(session: Session | None = None) -> Iterator[Session]:
    session = session or db.session
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
