"""AI system inventory service."""

import csv
import io
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from governance_api.models.database import AISystem
from governance_api.models.schemas import AISystemCreate, AISystemUpdate
from .exceptions import DuplicateRecordError, InvalidOperationError
from .record_reader import get_record_by_id

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "system_name": AISystem.system_name,
    "risk_classification": AISystem.risk_classification,
    "deployment_status": AISystem.deployment_status,
    "created_at": AISystem.created_at,
    "last_modified": AISystem.last_modified,
}


def list_ai_systems(
    db_session: Session,
    search: Optional[str] = None,
    risk: Optional[str] = None,
    status: Optional[str] = None,
    sort_by: str = "last_modified",
    sort_order: str = "desc",
) -> List[AISystem]:
    """
    List AI systems with optional search, filters and sorting.

    Args:
        db_session: Database session
        search: Case-insensitive substring matched against name, purpose and owners
        risk: Exact risk classification
        status: Exact deployment status
        sort_by: One of SORTABLE_COLUMNS
        sort_order: "asc" or "desc"

    Returns:
        Matching AI systems

    Raises:
        InvalidOperationError: If sort_by or sort_order is not supported
    """
    if sort_by not in SORTABLE_COLUMNS:
        raise InvalidOperationError(f"Cannot sort by {sort_by}")
    if sort_order not in ("asc", "desc"):
        raise InvalidOperationError(f"Invalid sort order: {sort_order}")

    query = db_session.query(AISystem)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                AISystem.system_name.ilike(pattern),
                AISystem.system_purpose.ilike(pattern),
                AISystem.business_owner.ilike(pattern),
                AISystem.technical_owner.ilike(pattern),
            )
        )
    if risk:
        query = query.filter(AISystem.risk_classification == risk)
    if status:
        query = query.filter(AISystem.deployment_status == status)

    column = SORTABLE_COLUMNS[sort_by]
    order = column.asc() if sort_order == "asc" else column.desc()
    return query.order_by(order, AISystem.system_id.asc()).all()


def get_ai_system(system_id: UUID, db_session: Session) -> AISystem:
    """Get an AI system, raising RecordNotFoundError if it does not exist."""
    return get_record_by_id(db_session, AISystem, system_id)


def _ensure_unique_name(system_name: str, db_session: Session) -> None:
    existing = db_session.query(AISystem).filter(AISystem.system_name == system_name).first()
    if existing is not None:
        raise DuplicateRecordError("A system with this name already exists")


def create_ai_system(request: AISystemCreate, db_session: Session) -> AISystem:
    """
    Register a new AI system.

    Raises:
        DuplicateRecordError: If the system name is taken
    """
    _ensure_unique_name(request.system_name, db_session)

    system = AISystem(**request.model_dump())

    try:
        db_session.add(system)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(system)
    logger.info(f"AI system {system.system_id} ({system.system_name}) registered")
    return system


def update_ai_system(system_id: UUID, request: AISystemUpdate, db_session: Session) -> AISystem:
    """
    Apply the fields sent in an AI system update.

    Raises:
        RecordNotFoundError: If the system does not exist
        DuplicateRecordError: If renamed to a name already in use
    """
    system = get_ai_system(system_id, db_session)
    changes = request.model_dump(exclude_unset=True)

    new_name = changes.get("system_name")
    if new_name is None:
        changes.pop("system_name", None)
    elif new_name != system.system_name:
        _ensure_unique_name(new_name, db_session)

    if "data_sources" in changes and changes["data_sources"] is None:
        changes["data_sources"] = []

    for field, value in changes.items():
        setattr(system, field, value)

    try:
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(system)
    return system


def delete_ai_system(system_id: UUID, db_session: Session) -> None:
    """
    Delete an AI system and every governance record attached to it.

    Raises:
        RecordNotFoundError: If the system does not exist
    """
    system = get_ai_system(system_id, db_session)

    try:
        db_session.delete(system)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    logger.info(f"AI system {system_id} deleted")


EXPORT_COLUMNS = (
    ("System ID", "system_id"),
    ("System Name", "system_name"),
    ("System Purpose", "system_purpose"),
    ("Business Owner", "business_owner"),
    ("Technical Owner", "technical_owner"),
    ("AI Model Type", "ai_model_type"),
    ("Deployment Status", "deployment_status"),
    ("Deployment Date", "deployment_date"),
    ("Data Sources", "data_sources"),
    ("Vendor/Provider", "vendor_provider"),
    ("Risk Classification", "risk_classification"),
    ("Date Added", "created_at"),
    ("Last Modified", "last_modified"),
    ("Modified By", "modified_by"),
)


def _export_value(system: AISystem, field: str) -> str:
    value = getattr(system, field)
    if value is None:
        return ""
    if field == "data_sources":
        return "; ".join(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def export_ai_systems_csv(db_session: Session, **filters) -> str:
    """
    Render the AI system inventory as CSV.

    Accepts the same search, filter and sort arguments as list_ai_systems, so
    an export matches what the inventory listing shows. Data sources are
    joined with "; " and missing values are written as empty cells.

    Raises:
        InvalidOperationError: If the sort arguments are not supported
    """
    systems = list_ai_systems(db_session, **filters)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for system in systems:
        writer.writerow([_export_value(system, field) for _, field in EXPORT_COLUMNS])

    logger.info(f"Exported {len(systems)} AI systems to CSV")
    return buffer.getvalue()
