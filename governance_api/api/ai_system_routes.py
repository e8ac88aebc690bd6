"""API routes for the AI system inventory."""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from governance_api.models import (
    AISystemCreate,
    AISystemUpdate,
    AISystemResponse,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    DuplicateRecordError,
    InvalidOperationError,
    list_ai_systems,
    get_ai_system,
    create_ai_system,
    update_ai_system,
    delete_ai_system,
    export_ai_systems_csv,
)
from .dependencies import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-systems", tags=["ai-systems"])


@router.get(
    "",
    response_model=List[AISystemResponse],
    responses={400: {"model": ErrorResponse}},
)
def list_systems(
    search: Optional[str] = None,
    risk: Optional[str] = None,
    deployment_status: Optional[str] = None,
    sort_by: str = "last_modified",
    sort_order: str = "desc",
    db: Session = Depends(get_db_session),
):
    """List AI systems with search, filters and sorting."""
    try:
        systems = list_ai_systems(
            db,
            search=search,
            risk=risk,
            status=deployment_status,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return [AISystemResponse.model_validate(system) for system in systems]

    except InvalidOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error fetching AI systems: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch AI systems",
        )


@router.post(
    "",
    response_model=AISystemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_system(
    request: AISystemCreate,
    db: Session = Depends(get_db_session),
):
    """Register an AI system. System names are unique."""
    try:
        system = create_ai_system(request, db)
        return AISystemResponse.model_validate(system)

    except DuplicateRecordError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating AI system: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create AI system",
        )


@router.get(
    "/export",
    response_class=Response,
    responses={400: {"model": ErrorResponse}},
)
def export_systems(
    search: Optional[str] = None,
    risk: Optional[str] = None,
    deployment_status: Optional[str] = None,
    sort_by: str = "last_modified",
    sort_order: str = "desc",
    db: Session = Depends(get_db_session),
):
    """Download the AI system inventory as CSV, with the same filters as the listing."""
    try:
        content = export_ai_systems_csv(
            db,
            search=search,
            risk=risk,
            status=deployment_status,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        filename = f"ai-systems-export-{date.today().isoformat()}.csv"
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    except InvalidOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error exporting AI systems: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export AI systems",
        )


@router.get(
    "/{system_id}",
    response_model=AISystemResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_system(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Get an AI system."""
    try:
        system = get_ai_system(system_id, db)
        return AISystemResponse.model_validate(system)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error fetching AI system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch AI system",
        )


@router.put(
    "/{system_id}",
    response_model=AISystemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_system(
    system_id: UUID,
    request: AISystemUpdate,
    db: Session = Depends(get_db_session),
):
    """Update an AI system."""
    try:
        system = update_ai_system(system_id, request, db)
        return AISystemResponse.model_validate(system)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except DuplicateRecordError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating AI system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update AI system",
        )


@router.delete("/{system_id}", responses={404: {"model": ErrorResponse}})
def delete_system(
    system_id: UUID,
    db: Session = Depends(get_db_session),
):
    """Delete an AI system and all of its governance records."""
    try:
        delete_ai_system(system_id, db)
        return {"success": True, "message": "AI system deleted successfully"}

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="AI system not found",
        )
    except Exception as e:
        logger.error(f"Error deleting AI system {system_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete AI system",
        )
