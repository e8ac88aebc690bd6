"""NIST AI RMF and UK AI regulation assessments.

Both frameworks share one record shape: an append-only assessment per AI
system, listed newest first and summarised later by a cross-framework
analysis. Recording one does not touch the AI system itself.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from governance_api.models.database import (
    AISystem,
    NISTAIRMFAssessment,
    UKAIRegulationAssessment,
)
from governance_api.models.schemas import (
    NISTAIRMFAssessmentCreate,
    UKAIRegulationAssessmentCreate,
)
from .exceptions import RecordNotFoundError
from .record_reader import get_latest_record, list_records

logger = logging.getLogger(__name__)


def _list_assessments(db_session: Session, model, system_id: Optional[UUID]) -> list:
    if system_id is not None:
        return list_records(
            db_session,
            model,
            model.system_id,
            system_id,
            model.assessment_date,
        )

    return (
        db_session.query(model)
        .options(joinedload(model.ai_system))
        .order_by(model.assessment_date.desc(), model.assessment_id.desc())
        .all()
    )


def _create_assessment(db_session: Session, model, request):
    system = db_session.query(AISystem).filter(AISystem.system_id == request.system_id).first()
    if system is None:
        raise RecordNotFoundError(f"AI system {request.system_id} not found")

    assessment = model(**request.model_dump(mode="json", exclude={"system_id"}))
    assessment.system_id = request.system_id

    try:
        db_session.add(assessment)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(assessment)
    logger.info(f"{model.__name__} {assessment.assessment_id} recorded for {system.system_name}")
    return assessment


# NIST AI RMF

def list_nist_ai_rmf_assessments(
    db_session: Session,
    system_id: Optional[UUID] = None,
) -> List[NISTAIRMFAssessment]:
    """List NIST AI RMF assessments, newest first, optionally for one system."""
    return _list_assessments(db_session, NISTAIRMFAssessment, system_id)


def get_latest_nist_ai_rmf_assessment(system_id: UUID, db_session: Session) -> NISTAIRMFAssessment:
    """
    Get the most recent NIST AI RMF assessment of an AI system.

    Raises:
        RecordNotFoundError: If the system has no NIST AI RMF assessment
    """
    return get_latest_record(
        db_session,
        NISTAIRMFAssessment,
        NISTAIRMFAssessment.system_id,
        system_id,
        NISTAIRMFAssessment.assessment_date,
    )


def create_nist_ai_rmf_assessment(
    request: NISTAIRMFAssessmentCreate,
    db_session: Session,
) -> NISTAIRMFAssessment:
    """
    Record a NIST AI RMF assessment.

    Args:
        request: Function scores, maturity level and recommendations
        db_session: Database session

    Returns:
        The persisted NISTAIRMFAssessment

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    return _create_assessment(db_session, NISTAIRMFAssessment, request)


# UK AI regulation

def list_uk_ai_regulation_assessments(
    db_session: Session,
    system_id: Optional[UUID] = None,
) -> List[UKAIRegulationAssessment]:
    """List UK AI regulation assessments, newest first, optionally for one system."""
    return _list_assessments(db_session, UKAIRegulationAssessment, system_id)


def get_latest_uk_ai_regulation_assessment(
    system_id: UUID,
    db_session: Session,
) -> UKAIRegulationAssessment:
    """
    Get the most recent UK AI regulation assessment of an AI system.

    Raises:
        RecordNotFoundError: If the system has no UK AI regulation assessment
    """
    return get_latest_record(
        db_session,
        UKAIRegulationAssessment,
        UKAIRegulationAssessment.system_id,
        system_id,
        UKAIRegulationAssessment.assessment_date,
    )


def create_uk_ai_regulation_assessment(
    request: UKAIRegulationAssessmentCreate,
    db_session: Session,
) -> UKAIRegulationAssessment:
    """
    Record a UK AI regulation principles assessment.

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    return _create_assessment(db_session, UKAIRegulationAssessment, request)
