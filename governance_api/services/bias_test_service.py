"""Bias test records and the bias and fairness dashboard."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from governance_api.models.database import AISystem, BiasTest, RemediationAction
from governance_api.models.schemas import BiasTestCreate, BiasTestStatus, BiasTestUpdate
from .exceptions import RecordNotFoundError
from .record_reader import get_record_by_id

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"test_name", "status"}


def _detail_options():
    return (
        joinedload(BiasTest.ai_system),
        selectinload(BiasTest.remediation_actions),
    )


def list_bias_tests(
    db_session: Session,
    system_id: Optional[UUID] = None,
    status: Optional[BiasTestStatus] = None,
) -> List[BiasTest]:
    """
    List bias tests, most recent test date first.

    Args:
        db_session: Database session
        system_id: Restrict to one AI system
        status: Restrict to one status

    Returns:
        Bias tests with their AI system and remediation actions loaded
    """
    query = db_session.query(BiasTest).options(*_detail_options())

    if system_id is not None:
        query = query.filter(BiasTest.system_id == system_id)
    if status is not None:
        query = query.filter(BiasTest.status == BiasTestStatus(status).value)

    return query.order_by(BiasTest.test_date.desc(), BiasTest.test_id.desc()).all()


def get_bias_test(test_id: UUID, db_session: Session) -> BiasTest:
    """
    Get a bias test with its AI system and remediation actions.

    Raises:
        RecordNotFoundError: If the test does not exist
    """
    return get_record_by_id(db_session, BiasTest, test_id, options=_detail_options())


def create_bias_test(request: BiasTestCreate, db_session: Session) -> BiasTest:
    """
    Record a bias test together with any remediation actions it raised.

    Args:
        request: Validated create request
        db_session: Database session

    Returns:
        The persisted BiasTest

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    system = db_session.query(AISystem).filter(AISystem.system_id == request.system_id).first()
    if system is None:
        raise RecordNotFoundError(f"AI system {request.system_id} not found")

    test = BiasTest(
        system_id=request.system_id,
        test_name=request.test_name,
        test_type=request.test_type,
        protected_attributes_tested=request.protected_attributes_tested,
        dataset_description=request.dataset_description,
        sample_size=request.sample_size,
        tested_by=request.tested_by,
        test_methodology=request.test_methodology,
        overall_fairness_score=request.overall_fairness_score,
        issues_detected=request.issues_detected,
        severity_level=request.severity_level,
        status=request.status.value,
        notes=request.notes,
    )

    for action_request in request.remediation_actions:
        action_data = action_request.model_dump()
        action_data["status"] = action_request.status.value
        test.remediation_actions.append(RemediationAction(**action_data))

    try:
        db_session.add(test)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    logger.info(
        f"Bias test {test.test_id} created for system {system.system_name} "
        f"with {len(request.remediation_actions)} remediation action(s)"
    )
    return get_bias_test(test.test_id, db_session)


def update_bias_test(test_id: UUID, request: BiasTestUpdate, db_session: Session) -> BiasTest:
    """
    Apply the fields sent in a bias test update.

    Raises:
        RecordNotFoundError: If the test does not exist
    """
    test = get_record_by_id(db_session, BiasTest, test_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if field in NON_NULLABLE_FIELDS and value is None:
            continue
        if field == "status":
            value = BiasTestStatus(value).value
        setattr(test, field, value)

    try:
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return get_bias_test(test_id, db_session)


def delete_bias_test(test_id: UUID, db_session: Session) -> None:
    """
    Delete a bias test and its remediation actions.

    Raises:
        RecordNotFoundError: If the test does not exist
    """
    test = get_record_by_id(db_session, BiasTest, test_id)

    try:
        db_session.delete(test)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    logger.info(f"Bias test {test_id} deleted")


def get_bias_test_dashboard() -> Dict[str, Any]:
    """
    Bias and fairness dashboard payload.

    Temporary: returns an empty static payload while the dashboard
    aggregation queries are rebuilt.
    """
    return {
        "status": "ok",
        "stats": {
            "total_tests": 0,
            "active_tests": 0,
            "completed_tests": 0,
            "remediation_needed": 0,
        },
        "systems_with_issues": [],
        "recent_tests": [],
    }
