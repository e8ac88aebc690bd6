"""API routes for model cards."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from governance_api.models import (
    ModelCardCreate,
    ModelCardUpdate,
    ModelCardResponse,
    ModelCardDetail,
    ModelCardVersion,
    ModelCardStatus,
    ModelCardDashboard,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    list_model_cards,
    get_model_card,
    get_latest_model_card,
    list_model_card_versions,
    create_model_card,
    update_model_card,
    delete_model_card,
    get_model_card_dashboard,
)
from .dependencies import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/model-cards", tags=["model-cards"])


@router.get("", response_model=List[ModelCardResponse])
def list_cards(
    system_id: Optional[UUID] = None,
    card_status: Optional[ModelCardStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db_session),
):
    """List model cards, most recently updated first."""
    try:
        cards = list_model_cards(db, system_id=system_id, status=card_status)
        return [ModelCardResponse.model_validate(card) for card in cards]

    except Exception as e:
        logger.error(f"Error fetching model cards: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch model cards",
        )


@router.post(
    "",
    response_model=ModelCardResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_card(
    request: ModelCardCreate,
    db: Session = Depends(get_db_session),
):
    """Create a model card version."""
    try:
        card = create_model_card(request, db)
        return ModelCardResponse.model_validate(card)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating model card: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create model card",
        )


@router.get("/dashboard", response_model=ModelCardDashboard)
def get_dashboard(db: Session = Depends(get_db_session)):
    """Card counts per status, documentation coverage and the most recent cards."""
    try:
        return ModelCardDashboard.model_validate(get_model_card_dashboard(db), from_attributes=True)

    except Exception as e:
        logger.error(f"Error fetching model card dashboard: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch dashboard data",
        )


@router.get(
    "/latest/{system_id}",
    response_model=ModelCardResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_latest_card(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get the most recently updated model card of an AI system."""
    try:
        card = get_latest_model_card(system_id, db)
        return ModelCardResponse.model_validate(card)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No model card found for this system",
        )
    except Exception as e:
        logger.error(f"Error fetching latest model card for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch latest model card",
        )


@router.get("/versions/{system_id}", response_model=List[ModelCardVersion])
def get_card_versions(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """
    Version history of an AI system's model cards, newest first.

    Returns an empty list when the system has no model cards.
    """
    try:
        rows = list_model_card_versions(system_id, db)
        return [ModelCardVersion.model_validate(row) for row in rows]

    except Exception as e:
        logger.error(f"Error fetching model card versions for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch versions",
        )


@router.get(
    "/{card_id}",
    response_model=ModelCardDetail,
    responses={404: {"model": ErrorResponse}},
)
def get_card(
    card_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get a model card with its AI system."""
    try:
        card = get_model_card(card_id, db)
        return ModelCardDetail.model_validate(card)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model card not found",
        )
    except Exception as e:
        logger.error(f"Error fetching model card {card_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch model card",
        )


@router.put(
    "/{card_id}",
    response_model=ModelCardResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_card(
    card_id: UUID,
    request: ModelCardUpdate,
    db: Session = Depends(get_db_session),
):
    """Update a model card."""
    try:
        card = update_model_card(card_id, request, db)
        return ModelCardResponse.model_validate(card)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model card not found",
        )
    except Exception as e:
        logger.error(f"Error updating model card {card_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update model card",
        )


@router.delete("/{card_id}", responses={404: {"model": ErrorResponse}})
def delete_card(
    card_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Delete a model card."""
    try:
        delete_model_card(card_id, db)
        return {"message": "Model card deleted successfully"}

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model card not found",
        )
    except Exception as e:
        logger.error(f"Error deleting model card {card_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete model card",
        )
