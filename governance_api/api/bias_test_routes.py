"""API routes for bias tests."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from governance_api.models import (
    BiasTestCreate,
    BiasTestUpdate,
    BiasTestResponse,
    BiasTestDashboard,
    BiasTestStatus,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    list_bias_tests,
    get_bias_test,
    create_bias_test,
    update_bias_test,
    delete_bias_test,
    get_bias_test_dashboard,
)
from .dependencies import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bias-tests", tags=["bias-tests"])


@router.get("/dashboard", response_model=BiasTestDashboard)
def bias_test_dashboard():
    """Bias and fairness dashboard (temporary static payload)."""
    return BiasTestDashboard(**get_bias_test_dashboard())


@router.get("", response_model=List[BiasTestResponse])
def list_tests(
    system_id: Optional[UUID] = None,
    test_status: Optional[BiasTestStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db_session),
):
    """List bias tests, most recent first."""
    try:
        tests = list_bias_tests(db, system_id=system_id, status=test_status)
        return [BiasTestResponse.model_validate(test) for test in tests]

    except Exception as e:
        logger.error(f"Error fetching bias tests: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch bias tests",
        )


@router.post(
    "",
    response_model=BiasTestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def create_test(
    request: BiasTestCreate,
    db: Session = Depends(get_db_session),
):
    """Record a bias test with its remediation actions."""
    try:
        test = create_bias_test(request, db)
        return BiasTestResponse.model_validate(test)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error creating bias test: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create bias test",
        )


@router.get(
    "/{test_id}",
    response_model=BiasTestResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_test(
    test_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get a bias test with its AI system and remediation actions."""
    try:
        test = get_bias_test(test_id, db)
        return BiasTestResponse.model_validate(test)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Test not found",
        )
    except Exception as e:
        logger.error(f"Error fetching bias test {test_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch bias test",
        )


@router.put(
    "/{test_id}",
    response_model=BiasTestResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_test(
    test_id: UUID,
    request: BiasTestUpdate,
    db: Session = Depends(get_db_session),
):
    """Update a bias test."""
    try:
        test = update_bias_test(test_id, request, db)
        return BiasTestResponse.model_validate(test)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Test not found",
        )
    except Exception as e:
        logger.error(f"Error updating bias test {test_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update bias test",
        )


@router.delete("/{test_id}", responses={404: {"model": ErrorResponse}})
def delete_test(
    test_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Delete a bias test and its remediation actions."""
    try:
        delete_bias_test(test_id, db)
        return {"success": True}

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Test not found",
        )
    except Exception as e:
        logger.error(f"Error deleting bias test {test_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete bias test",
        )
