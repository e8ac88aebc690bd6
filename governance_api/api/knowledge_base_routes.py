"""API routes for knowledge base article feedback."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from governance_api.models import (
    ArticleFeedbackRequest,
    ArticleFeedbackResponse,
    ErrorResponse,
)
from governance_api.services import (
    RecordNotFoundError,
    InvalidOperationError,
    submit_article_feedback,
)
from .dependencies import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/knowledge-base", tags=["knowledge-base"])


@router.post(
    "/{article_id}/feedback",
    response_model=ArticleFeedbackResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def submit_feedback(
    article_id: UUID,
    request: ArticleFeedbackRequest,
    db: Session = Depends(get_db_session),
):
    """Record whether a published article was helpful."""
    try:
        article = submit_article_feedback(article_id, request.feedback, db)
        return ArticleFeedbackResponse.model_validate(article)

    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Article not found",
        )
    except InvalidOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error submitting feedback for article {article_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit feedback",
        )
