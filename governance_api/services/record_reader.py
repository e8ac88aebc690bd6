"""Generic lookups shared by every read route.

Three shapes of read are supported:
    - one record by primary key
    - the most recent record for an owning entity
    - every record for an owning entity, newest first, optionally projected

"Most recent" ties on the ordering column are broken by primary key
descending so repeated calls return the same row.
"""

import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from .exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)


def _primary_key(model):
    return inspect(model).primary_key[0]


def get_record_by_id(
    db_session: Session,
    model,
    record_id: Any,
    options: Sequence[Any] = (),
):
    """
    Fetch a single record by primary key.

    Args:
        db_session: Database session
        model: Mapped class to query
        record_id: Primary key value
        options: Loader options, e.g. joinedload() of a parent relationship

    Returns:
        The matching record

    Raises:
        RecordNotFoundError: If no row has that primary key
    """
    record = (
        db_session.query(model)
        .options(*options)
        .filter(_primary_key(model) == record_id)
        .first()
    )

    if record is None:
        raise RecordNotFoundError(f"{model.__name__} {record_id} not found")

    return record


def get_latest_record(
    db_session: Session,
    model,
    fk_column,
    fk_value: Any,
    order_column,
    options: Sequence[Any] = (),
):
    """
    Fetch the most recent record for an owning entity.

    Args:
        db_session: Database session
        model: Mapped class to query
        fk_column: Foreign key column identifying the owner
        fk_value: Owner identifier
        order_column: Timestamp column defining "most recent"
        options: Loader options

    Returns:
        The record with the greatest order_column value

    Raises:
        RecordNotFoundError: If the owner has no records
    """
    record = (
        db_session.query(model)
        .options(*options)
        .filter(fk_column == fk_value)
        .order_by(order_column.desc(), _primary_key(model).desc())
        .first()
    )

    if record is None:
        raise RecordNotFoundError(f"No {model.__name__} found for {fk_value}")

    return record


def list_records(
    db_session: Session,
    model,
    fk_column,
    fk_value: Any,
    order_column,
    columns: Optional[Sequence[Any]] = None,
) -> List[Any]:
    """
    List every record for an owning entity, newest first.

    Args:
        db_session: Database session
        model: Mapped class to query
        fk_column: Foreign key column identifying the owner
        fk_value: Owner identifier
        order_column: Timestamp column to sort by (descending)
        columns: Optional subset of columns to return instead of full records

    Returns:
        Matching records (or rows of the projected columns); empty if none
    """
    query = db_session.query(*columns) if columns else db_session.query(model)

    return (
        query.filter(fk_column == fk_value)
        .order_by(order_column.desc(), _primary_key(model).desc())
        .all()
    )
