"""FastAPI dependencies resolving the handles built by the application factory."""

from typing import Optional

from fastapi import Request

from governance_api.events import EventProducer


def get_db_session(request: Request):
    """
    Get database session from the application's session maker.

    Yields:
        SQLAlchemy session, closed when the request finishes
    """
    session = request.app.state.session_maker()
    try:
        yield session
    finally:
        session.close()


def get_event_producer(request: Request) -> Optional[EventProducer]:
    """Get the application's event producer (None when events are disabled)."""
    return request.app.state.event_producer
