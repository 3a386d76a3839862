from contextlib import contextmanager
from app.extensions import db


@contextmanager
def atomic():
    """Commit everything written inside the block, or roll all of it back."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
