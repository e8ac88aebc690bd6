"""API routes for EU AI Act assessments and cross-framework analyses."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from governance_api.events import EventProducer
from governance_api.models import (
    EUAIActAssessmentCreate,
    EUAIActAssessmentResponse,
    EUAIActAssessmentDetail,
    EUAIActDashboard,
    CrossFrameworkAnalysisCreate,
    CrossFrameworkAnalysisResponse,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    get_eu_ai_act_dashboard,
    list_eu_ai_act_assessments,
    get_eu_ai_act_assessment,
    get_latest_eu_ai_act_assessment,
    create_eu_ai_act_assessment,
    list_cross_framework_analyses,
    get_latest_cross_framework_analysis,
    create_cross_framework_analysis,
)
from .dependencies import get_db_session, get_event_producer

logger = logging.getLogger(__name__)

eu_ai_act_dashboard_router = APIRouter(prefix="/api/eu-ai-act", tags=["eu-ai-act"])
eu_ai_act_router = APIRouter(prefix="/api/eu-ai-act/assessments", tags=["eu-ai-act"])
cross_framework_router = APIRouter(prefix="/api/cross-framework/analysis", tags=["cross-framework"])


@eu_ai_act_dashboard_router.get("/dashboard", response_model=EUAIActDashboard)
def get_dashboard(db: Session = Depends(get_db_session)):
    """
    EU AI Act overview.

    Counts systems per risk classification and lists every system with its
    latest assessment, most recently modified first.
    """
    try:
        return EUAIActDashboard.model_validate(get_eu_ai_act_dashboard(db))

    except Exception as e:
        logger.error(f"Error fetching EU AI Act dashboard: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch dashboard data",
        )


@eu_ai_act_router.get("", response_model=List[EUAIActAssessmentResponse])
def list_assessments(
    system_id: Optional[UUID] = None,
    db: Session = Depends(get_db_session),
):
    """List EU AI Act assessments, newest first."""
    try:
        assessments = list_eu_ai_act_assessments(db, system_id=system_id)
        return [EUAIActAssessmentResponse.model_validate(a) for a in assessments]

    except Exception as e:
        logger.error(f"Error fetching assessments: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assessments",
        )


@eu_ai_act_router.post(
    "",
    response_model=EUAIActAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_assessment(
    request: EUAIActAssessmentCreate,
    db: Session = Depends(get_db_session),
    event_producer: Optional[EventProducer] = Depends(get_event_producer),
):
    """
    Record an EU AI Act assessment.

    The assessed system's risk classification is set to the assessment's risk tier.
    """
    try:
        assessment = create_eu_ai_act_assessment(request, db, event_producer)
        return EUAIActAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating assessment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create assessment",
        )


@eu_ai_act_router.get(
    "/latest/{system_id}",
    response_model=EUAIActAssessmentResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_latest_assessment(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get the most recent EU AI Act assessment of an AI system."""
    try:
        assessment = get_latest_eu_ai_act_assessment(system_id, db)
        return EUAIActAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No assessment found for this system",
        )
    except Exception as e:
        logger.error(f"Error fetching latest assessment for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch latest assessment",
        )


@eu_ai_act_router.get(
    "/{assessment_id}",
    response_model=EUAIActAssessmentDetail,
    responses={404: {"model": ErrorResponse}},
)
def get_assessment(
    assessment_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get an EU AI Act assessment with its AI system."""
    try:
        assessment = get_eu_ai_act_assessment(assessment_id, db)
        return EUAIActAssessmentDetail.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assessment not found",
        )
    except Exception as e:
        logger.error(f"Error fetching assessment {assessment_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assessment",
        )


@cross_framework_router.get("", response_model=List[CrossFrameworkAnalysisResponse])
def list_analyses(
    system_id: Optional[UUID] = None,
    db: Session = Depends(get_db_session),
):
    """List cross-framework analyses, newest first."""
    try:
        analyses = list_cross_framework_analyses(db, system_id=system_id)
        return [CrossFrameworkAnalysisResponse.model_validate(a) for a in analyses]

    except Exception as e:
        logger.error(f"Error fetching cross-framework analyses: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch analyses",
        )


@cross_framework_router.post(
    "",
    response_model=CrossFrameworkAnalysisResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_analysis(
    request: CrossFrameworkAnalysisCreate,
    db: Session = Depends(get_db_session),
):
    """Record a cross-framework analysis."""
    try:
        analysis = create_cross_framework_analysis(request, db)
        return CrossFrameworkAnalysisResponse.model_validate(analysis)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating cross-framework analysis: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create analysis",
        )


@cross_framework_router.get(
    "/latest/{system_id}",
    response_model=CrossFrameworkAnalysisResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_latest_analysis(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get the most recent cross-framework analysis of an AI system."""
    try:
        analysis = get_latest_cross_framework_analysis(system_id, db)
        return CrossFrameworkAnalysisResponse.model_validate(analysis)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No analysis found for this system",
        )
    except Exception as e:
        logger.error(f"Error fetching latest cross-framework analysis for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch latest analysis",
        )
