"""API routes for NIST AI RMF and UK AI regulation assessments."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from governance_api.models import (
    NISTAIRMFAssessmentCreate,
    NISTAIRMFAssessmentResponse,
    UKAIRegulationAssessmentCreate,
    UKAIRegulationAssessmentResponse,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    list_nist_ai_rmf_assessments,
    get_latest_nist_ai_rmf_assessment,
    create_nist_ai_rmf_assessment,
    list_uk_ai_regulation_assessments,
    get_latest_uk_ai_regulation_assessment,
    create_uk_ai_regulation_assessment,
)
from .dependencies import get_db_session

logger = logging.getLogger(__name__)

nist_ai_rmf_router = APIRouter(prefix="/api/nist-ai-rmf/assessments", tags=["nist-ai-rmf"])
uk_ai_regulation_router = APIRouter(
    prefix="/api/uk-ai-regulation/assessments",
    tags=["uk-ai-regulation"],
)


@nist_ai_rmf_router.get("", response_model=List[NISTAIRMFAssessmentResponse])
def list_nist_assessments(
    system_id: Optional[UUID] = None,
    db: Session = Depends(get_db_session),
):
    """List NIST AI RMF assessments, newest first."""
    try:
        assessments = list_nist_ai_rmf_assessments(db, system_id=system_id)
        return [NISTAIRMFAssessmentResponse.model_validate(a) for a in assessments]

    except Exception as e:
        logger.error(f"Error fetching NIST AI RMF assessments: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assessments",
        )


@nist_ai_rmf_router.post(
    "",
    response_model=NISTAIRMFAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_nist_assessment(
    request: NISTAIRMFAssessmentCreate,
    db: Session = Depends(get_db_session),
):
    """Record a NIST AI RMF assessment: govern, map, measure and manage scores (0-5)."""
    try:
        assessment = create_nist_ai_rmf_assessment(request, db)
        return NISTAIRMFAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating NIST AI RMF assessment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create assessment",
        )


@nist_ai_rmf_router.get(
    "/latest/{system_id}",
    response_model=NISTAIRMFAssessmentResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_latest_nist_assessment(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get the most recent NIST AI RMF assessment of an AI system."""
    try:
        assessment = get_latest_nist_ai_rmf_assessment(system_id, db)
        return NISTAIRMFAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No assessment found for this system",
        )
    except Exception as e:
        logger.error(f"Error fetching latest NIST AI RMF assessment for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch latest assessment",
        )


@uk_ai_regulation_router.get("", response_model=List[UKAIRegulationAssessmentResponse])
def list_uk_assessments(
    system_id: Optional[UUID] = None,
    db: Session = Depends(get_db_session),
):
    """List UK AI regulation assessments, newest first."""
    try:
        assessments = list_uk_ai_regulation_assessments(db, system_id=system_id)
        return [UKAIRegulationAssessmentResponse.model_validate(a) for a in assessments]

    except Exception as e:
        logger.error(f"Error fetching UK AI regulation assessments: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assessments",
        )


@uk_ai_regulation_router.post(
    "",
    response_model=UKAIRegulationAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_uk_assessment(
    request: UKAIRegulationAssessmentCreate,
    db: Session = Depends(get_db_session),
):
    """Record an assessment against the five UK AI regulation principles."""
    try:
        assessment = create_uk_ai_regulation_assessment(request, db)
        return UKAIRegulationAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating UK AI regulation assessment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create assessment",
        )


@uk_ai_regulation_router.get(
    "/latest/{system_id}",
    response_model=UKAIRegulationAssessmentResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_latest_uk_assessment(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get the most recent UK AI regulation assessment of an AI system."""
    try:
        assessment = get_latest_uk_ai_regulation_assessment(system_id, db)
        return UKAIRegulationAssessmentResponse.model_validate(assessment)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No assessment found for this system",
        )
    except Exception as e:
        logger.error(f"Error fetching latest UK AI regulation assessment for system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch latest assessment",
        )
