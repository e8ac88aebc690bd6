"""API routes for remediation actions."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from governance_api.events import EventProducer
from governance_api.models import (
    RemediationActionCreate,
    RemediationActionUpdate,
    RemediationActionResponse,
    RemediationActionListItem,
    RemediationStatus,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    create_remediation_action,
    list_remediation_actions,
    update_remediation_action,
)
from .dependencies import get_db_session, get_event_producer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/remediation-actions", tags=["remediation-actions"])


@router.get("", response_model=List[RemediationActionListItem])
def list_actions(
    test_id: Optional[UUID] = None,
    action_status: Optional[RemediationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db_session),
):
    """
    List remediation actions.

    Optionally filtered by bias test and status; ordered by priority, then newest first.
    """
    try:
        actions = list_remediation_actions(db, test_id=test_id, status=action_status)
        return [
            RemediationActionListItem(
                **RemediationActionResponse.model_validate(action).model_dump(),
                test_name=action.bias_test.test_name if action.bias_test else None,
                system_name=(
                    action.bias_test.ai_system.system_name
                    if action.bias_test and action.bias_test.ai_system
                    else None
                ),
            )
            for action in actions
        ]

    except Exception as e:
        logger.error(f"Error fetching remediation actions: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch remediation actions",
        )


@router.post(
    "",
    response_model=RemediationActionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_action(
    request: RemediationActionCreate,
    db: Session = Depends(get_db_session),
):
    """Create a remediation action under an existing bias test."""
    try:
        action = create_remediation_action(request, db)
        return RemediationActionResponse.model_validate(action)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bias test not found",
        )
    except Exception as e:
        logger.error(f"Error creating remediation action: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create remediation action",
        )


@router.put(
    "/{action_id}",
    response_model=RemediationActionResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_action(
    action_id: UUID,
    request: RemediationActionUpdate,
    db: Session = Depends(get_db_session),
    event_producer: Optional[EventProducer] = Depends(get_event_producer),
):
    """
    Update a remediation action.

    Completing the last open action of a bias test marks the test REMEDIATION_COMPLETE.
    Returns the updated action.
    """
    try:
        action = update_remediation_action(action_id, request, db, event_producer)
        return RemediationActionResponse.model_validate(action)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Remediation action not found",
        )
    except Exception as e:
        logger.error(f"Error updating remediation action {action_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update remediation action",
        )
