"""Remediation action service.

Owns the one piece of cross-record logic in the API: when a remediation
action is marked COMPLETED and every other action on the same bias test is
already COMPLETED, the bias test moves to REMEDIATION_COMPLETE.

The field update and the cascade run in a single transaction. The action
row and its parent bias test row are locked (SELECT ... FOR UPDATE) so two
requests completing the last two actions of a test are serialised and the
second one sees the first one's committed status. If anything fails, the
whole update is rolled back.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from governance_api.events import (
    EventProducer,
    REMEDIATION_TOPIC,
    BIAS_TEST_TOPIC,
    RemediationActionUpdatedEvent,
    BiasTestRemediationCompleteEvent,
)
from governance_api.models.database import BiasTest, RemediationAction
from governance_api.models.schemas import (
    BiasTestStatus,
    RemediationActionCreate,
    RemediationActionUpdate,
    RemediationStatus,
)
from .exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

# Fields copied from the request only when the client sent them
OPTIONAL_FIELDS = ("assigned_to", "priority", "notes")


def update_remediation_action(
    action_id: UUID,
    updates: RemediationActionUpdate,
    db_session: Session,
    event_producer: Optional[EventProducer] = None,
) -> RemediationAction:
    """
    Apply an update to a remediation action and cascade completion.

    Args:
        action_id: Remediation action UUID
        updates: Validated update request
        db_session: Database session
        event_producer: Optional producer for governance events

    Returns:
        The updated RemediationAction

    Raises:
        RecordNotFoundError: If the action does not exist (nothing is written)
        SQLAlchemyError: On store failure (the whole update is rolled back)

    Cascade:
        Only when the applied status is COMPLETED. A missing parent test is
        skipped. Re-completing an action on a test that is already
        REMEDIATION_COMPLETE rewrites the same status.
    """
    try:
        action = (
            db_session.query(RemediationAction)
            .filter(RemediationAction.action_id == action_id)
            .with_for_update()
            .first()
        )

        if action is None:
            raise RecordNotFoundError(f"Remediation action {action_id} not found")

        fields_sent = updates.model_fields_set

        # status is NOT NULL; an explicit null leaves it unchanged
        if updates.status is not None:
            action.status = updates.status.value

        for field in OPTIONAL_FIELDS:
            if field in fields_sent:
                setattr(action, field, getattr(updates, field))

        # Dates are always written: absent or null clears them
        action.due_date = updates.due_date
        action.completion_date = updates.completion_date

        cascade = None
        if updates.status == RemediationStatus.COMPLETED:
            cascade = _cascade_completion(action, db_session)

        db_session.commit()

    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(action)
    logger.info(f"Remediation action {action_id} updated (status={action.status})")

    if event_producer is not None:
        _emit_update_events(event_producer, action, cascade)

    return action


def _cascade_completion(
    action: RemediationAction,
    db_session: Session,
) -> Optional[Tuple[BiasTest, int]]:
    """
    Mark the parent bias test REMEDIATION_COMPLETE if all its actions are done.

    Args:
        action: The action just set to COMPLETED (not yet committed)
        db_session: Database session holding the open transaction

    Returns:
        (bias test, action count) when the test was marked complete, else None
    """
    test = (
        db_session.query(BiasTest)
        .filter(BiasTest.test_id == action.test_id)
        .with_for_update()
        .first()
    )

    if test is None:
        logger.warning(
            f"Bias test {action.test_id} for remediation action {action.action_id} "
            f"not found, skipping status cascade"
        )
        return None

    siblings = (
        db_session.query(RemediationAction)
        .filter(RemediationAction.test_id == test.test_id)
        .all()
    )

    all_completed = all(
        sibling.action_id == action.action_id
        or sibling.status == RemediationStatus.COMPLETED.value
        for sibling in siblings
    )

    if not all_completed:
        return None

    test.status = BiasTestStatus.REMEDIATION_COMPLETE.value
    logger.info(f"Bias test {test.test_id} remediation complete ({len(siblings)} actions)")
    return test, len(siblings)


def _emit_update_events(
    event_producer: EventProducer,
    action: RemediationAction,
    cascade: Optional[Tuple[BiasTest, int]],
) -> None:
    """Emit events for a committed remediation update."""
    event_producer.emit(
        REMEDIATION_TOPIC,
        RemediationActionUpdatedEvent(
            action_id=action.action_id,
            test_id=action.test_id,
            status=action.status,
            assigned_to=action.assigned_to,
            priority=action.priority,
        ),
        key=str(action.test_id),
    )

    if cascade is not None:
        test, action_count = cascade
        event_producer.emit(
            BIAS_TEST_TOPIC,
            BiasTestRemediationCompleteEvent(
                test_id=test.test_id,
                system_id=test.system_id,
                completed_action_id=action.action_id,
                action_count=action_count,
            ),
            key=str(test.system_id),
        )


def create_remediation_action(
    request: RemediationActionCreate,
    db_session: Session,
) -> RemediationAction:
    """
    Create a remediation action under an existing bias test.

    Args:
        request: Validated create request
        db_session: Database session

    Returns:
        The persisted RemediationAction

    Raises:
        RecordNotFoundError: If the bias test does not exist
    """
    test = db_session.query(BiasTest).filter(BiasTest.test_id == request.test_id).first()
    if test is None:
        raise RecordNotFoundError(f"Bias test {request.test_id} not found")

    action = RemediationAction(
        test_id=request.test_id,
        issue_description=request.issue_description,
        recommended_action=request.recommended_action,
        assigned_to=request.assigned_to,
        priority=request.priority,
        status=request.status.value,
        due_date=request.due_date,
        completion_date=request.completion_date,
        notes=request.notes,
        follow_up_test_required=request.follow_up_test_required,
    )

    try:
        db_session.add(action)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(action)
    logger.info(f"Remediation action {action.action_id} created for bias test {test.test_id}")
    return action


def list_remediation_actions(
    db_session: Session,
    test_id: Optional[UUID] = None,
    status: Optional[RemediationStatus] = None,
) -> List[RemediationAction]:
    """
    List remediation actions, highest priority first, newest first within a priority.

    Args:
        db_session: Database session
        test_id: Restrict to one bias test
        status: Restrict to one status, as a RemediationStatus or its string value

    Returns:
        Remediation actions with their bias test and AI system loaded
    """
    query = db_session.query(RemediationAction).options(
        joinedload(RemediationAction.bias_test).joinedload(BiasTest.ai_system)
    )

    if test_id is not None:
        query = query.filter(RemediationAction.test_id == test_id)
    if status is not None:
        query = query.filter(RemediationAction.status == RemediationStatus(status).value)

    return query.order_by(
        RemediationAction.priority.asc(),
        RemediationAction.created_at.desc(),
    ).all()
