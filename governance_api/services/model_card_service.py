"""Model card service."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session, joinedload

from governance_api.models.database import AISystem, ModelCard
from governance_api.models.schemas import ModelCardCreate, ModelCardStatus, ModelCardUpdate
from .exceptions import RecordNotFoundError
from .record_reader import get_latest_record, get_record_by_id, list_records

logger = logging.getLogger(__name__)

DASHBOARD_UNDOCUMENTED_LIMIT = 5
DASHBOARD_RECENT_LIMIT = 10

# Columns returned by the version history listing
VERSION_COLUMNS = (
    ModelCard.card_id,
    ModelCard.card_version,
    ModelCard.status,
    ModelCard.last_updated,
    ModelCard.updated_by,
    ModelCard.approved_by,
    ModelCard.approval_date,
)


def list_model_cards(
    db_session: Session,
    system_id: Optional[UUID] = None,
    status: Optional[ModelCardStatus] = None,
) -> List[ModelCard]:
    """List model cards, most recently updated first."""
    query = db_session.query(ModelCard).options(joinedload(ModelCard.ai_system))

    if system_id is not None:
        query = query.filter(ModelCard.system_id == system_id)
    if status is not None:
        query = query.filter(ModelCard.status == ModelCardStatus(status).value)

    return query.order_by(ModelCard.last_updated.desc(), ModelCard.card_id.desc()).all()


def get_model_card(card_id: UUID, db_session: Session) -> ModelCard:
    """
    Get a model card with its AI system.

    Raises:
        RecordNotFoundError: If the card does not exist
    """
    return get_record_by_id(
        db_session, ModelCard, card_id, options=(joinedload(ModelCard.ai_system),)
    )


def get_latest_model_card(system_id: UUID, db_session: Session) -> ModelCard:
    """
    Get the most recently updated model card of an AI system.

    Raises:
        RecordNotFoundError: If the system has no model cards
    """
    return get_latest_record(
        db_session,
        ModelCard,
        ModelCard.system_id,
        system_id,
        ModelCard.last_updated,
        options=(joinedload(ModelCard.ai_system),),
    )


def list_model_card_versions(system_id: UUID, db_session: Session) -> list:
    """
    Version history of an AI system's model cards, newest first.

    Returns:
        Rows of VERSION_COLUMNS; empty when the system has no cards
    """
    return list_records(
        db_session,
        ModelCard,
        ModelCard.system_id,
        system_id,
        ModelCard.last_updated,
        columns=VERSION_COLUMNS,
    )


def create_model_card(request: ModelCardCreate, db_session: Session) -> ModelCard:
    """
    Create a model card version for an AI system.

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    system = db_session.query(AISystem).filter(AISystem.system_id == request.system_id).first()
    if system is None:
        raise RecordNotFoundError(f"AI system {request.system_id} not found")

    card_data = request.model_dump()
    card_data["status"] = request.status.value
    card = ModelCard(**card_data, last_updated=datetime.utcnow())

    try:
        db_session.add(card)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    logger.info(f"Model card {card.card_id} v{card.card_version} created for {system.system_name}")
    return get_model_card(card.card_id, db_session)


def update_model_card(card_id: UUID, request: ModelCardUpdate, db_session: Session) -> ModelCard:
    """
    Apply the fields sent in a model card update and bump last_updated.

    Raises:
        RecordNotFoundError: If the card does not exist
    """
    card = get_record_by_id(db_session, ModelCard, card_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if field in ("card_version", "status") and value is None:
            continue
        if field == "status":
            value = ModelCardStatus(value).value
        setattr(card, field, value)

    card.last_updated = datetime.utcnow()

    try:
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return get_model_card(card_id, db_session)


def delete_model_card(card_id: UUID, db_session: Session) -> None:
    """
    Delete a model card.

    Raises:
        RecordNotFoundError: If the card does not exist
    """
    card = get_record_by_id(db_session, ModelCard, card_id)

    try:
        db_session.delete(card)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    logger.info(f"Model card {card_id} deleted")


def get_model_card_dashboard(db_session: Session) -> Dict[str, Any]:
    """
    Model card dashboard: card counts per status, documentation coverage,
    systems still lacking a published card and the ten most recent cards.

    Returns:
        {"stats": {...}, "systems_needing_documentation": [...], "recent_cards": [...]}
    """
    status_counts = dict(
        db_session.query(ModelCard.status, func.count(ModelCard.card_id))
        .group_by(ModelCard.status)
        .all()
    )
    total_systems = db_session.query(func.count(AISystem.system_id)).scalar() or 0
    systems_with_cards = (
        db_session.query(func.count(distinct(ModelCard.system_id))).scalar() or 0
    )

    stats = {
        "total_cards": sum(status_counts.values()),
        "draft_cards": status_counts.get(ModelCardStatus.DRAFT.value, 0),
        "under_review_cards": status_counts.get(ModelCardStatus.UNDER_REVIEW.value, 0),
        "approved_cards": status_counts.get(ModelCardStatus.APPROVED.value, 0),
        "published_cards": status_counts.get(ModelCardStatus.PUBLISHED.value, 0),
        "total_systems": total_systems,
        "systems_with_cards": systems_with_cards,
        "undocumented_systems": total_systems - systems_with_cards,
    }

    published = select(ModelCard.system_id).where(
        ModelCard.status == ModelCardStatus.PUBLISHED.value
    )
    systems_needing_documentation = (
        db_session.query(AISystem)
        .filter(AISystem.system_id.not_in(published))
        .order_by(AISystem.system_name.asc())
        .limit(DASHBOARD_UNDOCUMENTED_LIMIT)
        .all()
    )

    recent_cards = (
        db_session.query(ModelCard)
        .options(joinedload(ModelCard.ai_system))
        .order_by(ModelCard.last_updated.desc(), ModelCard.card_id.desc())
        .limit(DASHBOARD_RECENT_LIMIT)
        .all()
    )

    return {
        "stats": stats,
        "systems_needing_documentation": systems_needing_documentation,
        "recent_cards": recent_cards,
    }
