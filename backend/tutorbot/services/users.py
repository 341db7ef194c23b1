from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tutorbot.models.user import User


def ensure_user(session: Session, user_id: str) -> User:
    """Get or create the user row for an opaque client id."""
    user = session.exec(select(User).where(User.user_id == user_id)).first()
    if user:
        return user

    user = User(user_id=user_id)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        return session.exec(select(User).where(User.user_id == user_id)).one()
    session.refresh(user)
    return user
