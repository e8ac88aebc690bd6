"""Knowledge base article feedback."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from governance_api.models.database import KnowledgeBaseArticle
from governance_api.models.schemas import ArticleStatus
from .exceptions import InvalidOperationError
from .record_reader import get_record_by_id

logger = logging.getLogger(__name__)

FEEDBACK_COUNTERS = {
    "helpful": KnowledgeBaseArticle.helpful_count,
    "not_helpful": KnowledgeBaseArticle.not_helpful_count,
}


def submit_article_feedback(
    article_id: UUID,
    feedback: str,
    db_session: Session,
) -> KnowledgeBaseArticle:
    """
    Count a reader's helpful / not helpful vote on a published article.

    Args:
        article_id: Article UUID
        feedback: "helpful" or "not_helpful"
        db_session: Database session

    Returns:
        The article with updated counters

    Raises:
        InvalidOperationError: If the feedback value is unknown or the article is not published
        RecordNotFoundError: If the article does not exist
    """
    counter = FEEDBACK_COUNTERS.get(feedback)
    if counter is None:
        raise InvalidOperationError("Invalid feedback value")

    article = get_record_by_id(db_session, KnowledgeBaseArticle, article_id)

    if article.status != ArticleStatus.PUBLISHED.value:
        raise InvalidOperationError("Cannot provide feedback on unpublished article")

    # Atomic increment
    try:
        db_session.query(KnowledgeBaseArticle).filter(
            KnowledgeBaseArticle.id == article_id
        ).update({counter: counter + 1}, synchronize_session=False)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    db_session.refresh(article)
    logger.info(f"Feedback '{feedback}' recorded for article {article_id}")
    return article
