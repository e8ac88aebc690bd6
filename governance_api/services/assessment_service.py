"""EU AI Act assessments, the EU AI Act dashboard and cross-framework analyses."""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from governance_api.events import (
    EventProducer,
    EU_AI_ACT_TOPIC,
    EUAIActAssessmentRecordedEvent,
)
from governance_api.models.database import (
    AISystem,
    CrossFrameworkAnalysis,
    EUAIActAssessment,
)
from governance_api.models.schemas import (
    CrossFrameworkAnalysisCreate,
    EUAIActAssessmentCreate,
)
from .exceptions import RecordNotFoundError
from .record_reader import get_latest_record, get_record_by_id, list_records

logger = logging.getLogger(__name__)


# EU AI Act

def list_eu_ai_act_assessments(
    db_session: Session,
    system_id: Optional[UUID] = None,
) -> List[EUAIActAssessment]:
    """List EU AI Act assessments, newest first, optionally for one system."""
    if system_id is not None:
        return list_records(
            db_session,
            EUAIActAssessment,
            EUAIActAssessment.system_id,
            system_id,
            EUAIActAssessment.assessment_date,
        )

    return (
        db_session.query(EUAIActAssessment)
        .options(joinedload(EUAIActAssessment.ai_system))
        .order_by(
            EUAIActAssessment.assessment_date.desc(),
            EUAIActAssessment.assessment_id.desc(),
        )
        .all()
    )


def get_eu_ai_act_assessment(assessment_id: UUID, db_session: Session) -> EUAIActAssessment:
    """
    Get an EU AI Act assessment with its AI system.

    Raises:
        RecordNotFoundError: If the assessment does not exist
    """
    return get_record_by_id(
        db_session,
        EUAIActAssessment,
        assessment_id,
        options=(joinedload(EUAIActAssessment.ai_system),),
    )


def get_latest_eu_ai_act_assessment(system_id: UUID, db_session: Session) -> EUAIActAssessment:
    """
    Get the most recent EU AI Act assessment of an AI system.

    Raises:
        RecordNotFoundError: If the system has never been assessed
    """
    return get_latest_record(
        db_session,
        EUAIActAssessment,
        EUAIActAssessment.system_id,
        system_id,
        EUAIActAssessment.assessment_date,
    )


def create_eu_ai_act_assessment(
    request: EUAIActAssessmentCreate,
    db_session: Session,
    event_producer: Optional[EventProducer] = None,
) -> EUAIActAssessment:
    """
    Record an EU AI Act assessment and reclassify the assessed system.

    The assessment insert and the system's risk_classification update are
    committed together.

    Args:
        request: Validated create request
        db_session: Database session
        event_producer: Optional producer for governance events

    Returns:
        The persisted EUAIActAssessment

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    try:
        system = (
            db_session.query(AISystem)
            .filter(AISystem.system_id == request.system_id)
            .with_for_update()
            .first()
        )
        if system is None:
            raise RecordNotFoundError(f"AI system {request.system_id} not found")

        assessment = EUAIActAssessment(**request.model_dump())
        db_session.add(assessment)

        system.risk_classification = request.risk_tier
        system.modified_by = request.assessed_by

        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(assessment)
    logger.info(
        f"EU AI Act assessment {assessment.assessment_id} recorded: "
        f"system {request.system_id} classified {request.risk_tier}"
    )

    if event_producer is not None:
        event_producer.emit(
            EU_AI_ACT_TOPIC,
            EUAIActAssessmentRecordedEvent(
                assessment_id=assessment.assessment_id,
                system_id=assessment.system_id,
                risk_tier=assessment.risk_tier,
                assessed_by=assessment.assessed_by,
            ),
            key=str(assessment.system_id),
        )

    return assessment


# Counted per risk_classification value on the dashboard
RISK_CLASSIFICATION_STATS = {
    "prohibited": "PROHIBITED",
    "high_risk": "HIGH_RISK",
    "limited_risk": "LIMITED_RISK",
    "minimal_risk": "MINIMAL_RISK",
    "not_assessed": "NOT_YET_ASSESSED",
}


def get_eu_ai_act_dashboard(db_session: Session) -> Dict[str, Any]:
    """
    EU AI Act dashboard: risk classification counts and every system with
    its most recent assessment.

    Returns:
        {"stats": {...}, "systems": [...]} with systems most recently modified first
    """
    counts = dict(
        db_session.query(AISystem.risk_classification, func.count(AISystem.system_id))
        .group_by(AISystem.risk_classification)
        .all()
    )
    total_assessments = db_session.query(func.count(EUAIActAssessment.assessment_id)).scalar()

    stats = {
        "total_systems": sum(counts.values()),
        "total_assessments": total_assessments or 0,
    }
    for key, classification in RISK_CLASSIFICATION_STATS.items():
        stats[key] = counts.get(classification, 0)

    systems = (
        db_session.query(AISystem)
        .options(selectinload(AISystem.eu_ai_act_assessments))
        .order_by(AISystem.last_modified.desc(), AISystem.system_id.asc())
        .all()
    )

    rows = []
    for system in systems:
        latest = max(
            system.eu_ai_act_assessments,
            key=lambda a: (a.assessment_date, a.assessment_id),
            default=None,
        )
        rows.append({
            "system_id": system.system_id,
            "system_name": system.system_name,
            "business_owner": system.business_owner,
            "deployment_status": system.deployment_status,
            "risk_classification": system.risk_classification,
            "last_modified": system.last_modified,
            "latest_assessment": None if latest is None else {
                "assessment_id": latest.assessment_id,
                "assessment_date": latest.assessment_date,
                "assessed_by": latest.assessed_by,
            },
        })

    return {"stats": stats, "systems": rows}


# Cross-framework

def list_cross_framework_analyses(
    db_session: Session,
    system_id: Optional[UUID] = None,
) -> List[CrossFrameworkAnalysis]:
    """List cross-framework analyses, newest first, optionally for one system."""
    if system_id is not None:
        return list_records(
            db_session,
            CrossFrameworkAnalysis,
            CrossFrameworkAnalysis.system_id,
            system_id,
            CrossFrameworkAnalysis.analysis_date,
        )

    return (
        db_session.query(CrossFrameworkAnalysis)
        .order_by(
            CrossFrameworkAnalysis.analysis_date.desc(),
            CrossFrameworkAnalysis.analysis_id.desc(),
        )
        .all()
    )


def get_latest_cross_framework_analysis(
    system_id: UUID,
    db_session: Session,
) -> CrossFrameworkAnalysis:
    """
    Get the most recent cross-framework analysis of an AI system.

    Raises:
        RecordNotFoundError: If the system has no analyses
    """
    return get_latest_record(
        db_session,
        CrossFrameworkAnalysis,
        CrossFrameworkAnalysis.system_id,
        system_id,
        CrossFrameworkAnalysis.analysis_date,
    )


def create_cross_framework_analysis(
    request: CrossFrameworkAnalysisCreate,
    db_session: Session,
) -> CrossFrameworkAnalysis:
    """
    Record a cross-framework analysis.

    Raises:
        RecordNotFoundError: If the AI system does not exist
    """
    system = db_session.query(AISystem).filter(AISystem.system_id == request.system_id).first()
    if system is None:
        raise RecordNotFoundError(f"AI system {request.system_id} not found")

    analysis = CrossFrameworkAnalysis(**request.model_dump())

    try:
        db_session.add(analysis)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(analysis)
    logger.info(f"Cross-framework analysis {analysis.analysis_id} recorded for {system.system_name}")
    return analysis
