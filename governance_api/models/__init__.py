"""Database models and API schemas for the AI governance API."""

from .database import (
    Base,
    AISystem,
    BiasTest,
    RemediationAction,
    ModelCard,
    EUAIActAssessment,
    NISTAIRMFAssessment,
    UKAIRegulationAssessment,
    CrossFrameworkAnalysis,
    KnowledgeBaseArticle,
    get_db_engine,
    get_session_maker,
    init_db,
)
from .schemas import (
    RemediationStatus,
    BiasTestStatus,
    ModelCardStatus,
    ArticleStatus,
    NISTMaturityLevel,
    ImplementationLevel,
    SystemSummary,
    SystemDetail,
    AISystemCreate,
    AISystemUpdate,
    AISystemResponse,
    RemediationActionFields,
    RemediationActionCreate,
    RemediationActionUpdate,
    RemediationActionResponse,
    RemediationActionListItem,
    BiasTestCreate,
    BiasTestUpdate,
    BiasTestResponse,
    BiasTestDashboard,
    ModelCardCreate,
    ModelCardUpdate,
    ModelCardResponse,
    ModelCardDetail,
    ModelCardVersion,
    ModelCardDashboardStats,
    UndocumentedSystem,
    ModelCardDashboard,
    EUAIActAssessmentCreate,
    EUAIActAssessmentResponse,
    EUAIActAssessmentDetail,
    EUAIActDashboardStats,
    AssessmentSummary,
    EUAIActDashboardSystem,
    EUAIActDashboard,
    NISTAIRMFAssessmentCreate,
    NISTAIRMFAssessmentResponse,
    UKAIRegulationAssessmentCreate,
    UKAIRegulationAssessmentResponse,
    CrossFrameworkAnalysisCreate,
    CrossFrameworkAnalysisResponse,
    ArticleFeedbackRequest,
    ArticleFeedbackResponse,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    # Database models
    "Base",
    "AISystem",
    "BiasTest",
    "RemediationAction",
    "ModelCard",
    "EUAIActAssessment",
    "NISTAIRMFAssessment",
    "UKAIRegulationAssessment",
    "CrossFrameworkAnalysis",
    "KnowledgeBaseArticle",
    "get_db_engine",
    "get_session_maker",
    "init_db",
    # Status enumerations
    "RemediationStatus",
    "BiasTestStatus",
    "ModelCardStatus",
    "ArticleStatus",
    "NISTMaturityLevel",
    "ImplementationLevel",
    # API schemas
    "SystemSummary",
    "SystemDetail",
    "AISystemCreate",
    "AISystemUpdate",
    "AISystemResponse",
    "RemediationActionFields",
    "RemediationActionCreate",
    "RemediationActionUpdate",
    "RemediationActionResponse",
    "RemediationActionListItem",
    "BiasTestCreate",
    "BiasTestUpdate",
    "BiasTestResponse",
    "BiasTestDashboard",
    "ModelCardCreate",
    "ModelCardUpdate",
    "ModelCardResponse",
    "ModelCardDetail",
    "ModelCardVersion",
    "ModelCardDashboardStats",
    "UndocumentedSystem",
    "ModelCardDashboard",
    "EUAIActAssessmentCreate",
    "EUAIActAssessmentResponse",
    "EUAIActAssessmentDetail",
    "EUAIActDashboardStats",
    "AssessmentSummary",
    "EUAIActDashboardSystem",
    "EUAIActDashboard",
    "NISTAIRMFAssessmentCreate",
    "NISTAIRMFAssessmentResponse",
    "UKAIRegulationAssessmentCreate",
    "UKAIRegulationAssessmentResponse",
    "CrossFrameworkAnalysisCreate",
    "CrossFrameworkAnalysisResponse",
    "ArticleFeedbackRequest",
    "ArticleFeedbackResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
