"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from uuid import UUID

from pydantic import BaseModel, Field


# Status Enumerations

class RemediationStatus(str, Enum):
    """Lifecycle states of a remediation action."""

    NOT_STARTED = "NOT_STARTED"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class BiasTestStatus(str, Enum):
    """Aggregate states of a bias test."""

    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REMEDIATION_NEEDED = "REMEDIATION_NEEDED"
    REMEDIATION_COMPLETE = "REMEDIATION_COMPLETE"


class ModelCardStatus(str, Enum):
    """Approval states of a model card."""

    DRAFT = "DRAFT"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"


class ArticleStatus(str, Enum):
    """Publication states of a knowledge base article."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class NISTMaturityLevel(str, Enum):
    """NIST AI RMF overall maturity levels."""

    INITIAL = "INITIAL"
    DEVELOPING = "DEVELOPING"
    DEFINED = "DEFINED"
    MANAGED = "MANAGED"
    OPTIMISING = "OPTIMISING"


class ImplementationLevel(str, Enum):
    """How far a UK AI regulation principle is addressed."""

    NOT_ADDRESSED = "NOT_ADDRESSED"
    PARTIALLY_ADDRESSED = "PARTIALLY_ADDRESSED"
    FULLY_ADDRESSED = "FULLY_ADDRESSED"


# AI System Schemas

class SystemSummary(BaseModel):
    """Display fields of the AI system that owns a record."""

    system_name: str
    business_owner: Optional[str] = None
    technical_owner: Optional[str] = None

    class Config:
        from_attributes = True


class SystemDetail(SystemSummary):
    """Extended AI system fields shown alongside a model card."""

    ai_model_type: Optional[str] = None
    deployment_status: Optional[str] = None
    deployment_date: Optional[date] = None
    data_sources: List[str] = Field(default_factory=list)


class AISystemCreate(BaseModel):
    """Request to register an AI system."""

    system_name: str = Field(..., min_length=1)
    system_purpose: Optional[str] = None
    business_owner: Optional[str] = None
    technical_owner: Optional[str] = None
    ai_model_type: Optional[str] = None
    deployment_status: str = "DEVELOPMENT"
    deployment_date: Optional[date] = None
    data_sources: List[str] = Field(default_factory=list)
    vendor_provider: Optional[str] = None
    risk_classification: str = "NOT_YET_ASSESSED"
    modified_by: Optional[str] = None


class AISystemUpdate(BaseModel):
    """Partial update of an AI system. Only fields sent are applied."""

    system_name: Optional[str] = Field(None, min_length=1)
    system_purpose: Optional[str] = None
    business_owner: Optional[str] = None
    technical_owner: Optional[str] = None
    ai_model_type: Optional[str] = None
    deployment_status: Optional[str] = None
    deployment_date: Optional[date] = None
    data_sources: Optional[List[str]] = None
    vendor_provider: Optional[str] = None
    risk_classification: Optional[str] = None
    modified_by: Optional[str] = None


class AISystemResponse(BaseModel):
    """AI system record."""

    system_id: UUID
    system_name: str
    system_purpose: Optional[str] = None
    business_owner: Optional[str] = None
    technical_owner: Optional[str] = None
    ai_model_type: Optional[str] = None
    deployment_status: Optional[str] = None
    deployment_date: Optional[date] = None
    data_sources: List[str] = Field(default_factory=list)
    vendor_provider: Optional[str] = None
    risk_classification: Optional[str] = None
    modified_by: Optional[str] = None
    created_at: datetime
    last_modified: Optional[datetime] = None

    class Config:
        from_attributes = True


# Remediation Action Schemas

class RemediationActionFields(BaseModel):
    """Fields shared by remediation action create requests."""

    issue_description: Optional[str] = None
    recommended_action: Optional[str] = None
    assigned_to: Optional[str] = None
    priority: Optional[str] = None
    status: RemediationStatus = RemediationStatus.NOT_STARTED
    due_date: Optional[date] = None
    completion_date: Optional[date] = None
    notes: Optional[str] = None
    follow_up_test_required: bool = False


class RemediationActionCreate(RemediationActionFields):
    """Request to create a remediation action under an existing bias test."""

    test_id: UUID


class RemediationActionUpdate(BaseModel):
    """Update of a remediation action's mutable fields.

    status, assigned_to, priority and notes are applied only when present in
    the request body. due_date and completion_date are always written; an
    absent or null date clears the stored value.
    """

    status: Optional[RemediationStatus] = None
    assigned_to: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[date] = None
    completion_date: Optional[date] = None
    notes: Optional[str] = None


class RemediationActionResponse(BaseModel):
    """Remediation action record."""

    action_id: UUID
    test_id: UUID
    issue_description: Optional[str] = None
    recommended_action: Optional[str] = None
    assigned_to: Optional[str] = None
    priority: Optional[str] = None
    status: str
    due_date: Optional[date] = None
    completion_date: Optional[date] = None
    notes: Optional[str] = None
    follow_up_test_required: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RemediationActionListItem(RemediationActionResponse):
    """Remediation action with the names of its bias test and AI system."""

    test_name: Optional[str] = None
    system_name: Optional[str] = None


# Bias Test Schemas

class BiasTestCreate(BaseModel):
    """Request to record a bias test, optionally with its remediation actions."""

    system_id: UUID
    test_name: str = Field(..., min_length=1)
    test_type: Optional[str] = None
    protected_attributes_tested: List[str] = Field(default_factory=list)
    dataset_description: Optional[str] = None
    sample_size: Optional[int] = Field(None, ge=0)
    tested_by: Optional[str] = None
    test_methodology: Optional[str] = None
    overall_fairness_score: float = 0.0
    issues_detected: bool = False
    severity_level: Optional[str] = None
    status: BiasTestStatus = BiasTestStatus.PLANNED
    notes: Optional[str] = None
    remediation_actions: List[RemediationActionFields] = Field(default_factory=list)


class BiasTestUpdate(BaseModel):
    """Partial update of a bias test. Only fields sent are applied."""

    test_name: Optional[str] = Field(None, min_length=1)
    status: Optional[BiasTestStatus] = None
    severity_level: Optional[str] = None
    issues_detected: Optional[bool] = None
    overall_fairness_score: Optional[float] = None
    notes: Optional[str] = None


class BiasTestResponse(BaseModel):
    """Bias test record with its remediation actions."""

    test_id: UUID
    system_id: UUID
    test_name: str
    test_type: Optional[str] = None
    protected_attributes_tested: List[str] = Field(default_factory=list)
    dataset_description: Optional[str] = None
    sample_size: Optional[int] = None
    tested_by: Optional[str] = None
    test_methodology: Optional[str] = None
    test_date: datetime
    overall_fairness_score: Optional[float] = None
    issues_detected: bool = False
    severity_level: Optional[str] = None
    status: str
    notes: Optional[str] = None
    remediation_actions: List[RemediationActionResponse] = Field(default_factory=list)
    ai_system: Optional[SystemSummary] = None

    class Config:
        from_attributes = True


class BiasTestDashboard(BaseModel):
    """Bias and fairness dashboard payload."""

    status: str
    stats: Dict[str, int]
    systems_with_issues: List[Dict[str, Any]]
    recent_tests: List[Dict[str, Any]]


# Model Card Schemas

class ModelCardCreate(BaseModel):
    """Request to create a model card version."""

    system_id: UUID
    card_version: str = "1.0"
    status: ModelCardStatus = ModelCardStatus.DRAFT
    model_overview: Optional[str] = None
    intended_use: Optional[str] = None
    limitations: Optional[str] = None
    ethical_considerations: Optional[str] = None
    updated_by: Optional[str] = None


class ModelCardUpdate(BaseModel):
    """Partial update of a model card. Only fields sent are applied."""

    card_version: Optional[str] = None
    status: Optional[ModelCardStatus] = None
    model_overview: Optional[str] = None
    intended_use: Optional[str] = None
    limitations: Optional[str] = None
    ethical_considerations: Optional[str] = None
    updated_by: Optional[str] = None
    approved_by: Optional[str] = None
    approval_date: Optional[datetime] = None


class ModelCardResponse(BaseModel):
    """Model card record with its AI system's display fields."""

    card_id: UUID
    system_id: UUID
    card_version: str
    status: str
    model_overview: Optional[str] = None
    intended_use: Optional[str] = None
    limitations: Optional[str] = None
    ethical_considerations: Optional[str] = None
    updated_by: Optional[str] = None
    approved_by: Optional[str] = None
    approval_date: Optional[datetime] = None
    created_at: datetime
    last_updated: datetime
    ai_system: Optional[SystemSummary] = None

    class Config:
        from_attributes = True


class ModelCardDetail(ModelCardResponse):
    """Model card with extended AI system fields."""

    ai_system: Optional[SystemDetail] = None


class ModelCardVersion(BaseModel):
    """Version history entry of a model card."""

    card_id: UUID
    card_version: str
    status: str
    last_updated: datetime
    updated_by: Optional[str] = None
    approved_by: Optional[str] = None
    approval_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class ModelCardDashboardStats(BaseModel):
    """Model card counts per status and documentation coverage."""

    total_cards: int
    draft_cards: int
    under_review_cards: int
    approved_cards: int
    published_cards: int
    total_systems: int
    systems_with_cards: int
    undocumented_systems: int


class UndocumentedSystem(BaseModel):
    """AI system without a published model card."""

    system_id: UUID
    system_name: str
    risk_classification: Optional[str] = None
    business_owner: Optional[str] = None

    class Config:
        from_attributes = True


class ModelCardDashboard(BaseModel):
    """Model card dashboard payload."""

    stats: ModelCardDashboardStats
    systems_needing_documentation: List[UndocumentedSystem]
    recent_cards: List[ModelCardResponse]


# EU AI Act Schemas

class EUAIActAssessmentCreate(BaseModel):
    """Request to record an EU AI Act assessment."""

    system_id: UUID
    risk_tier: str = Field(..., min_length=1)
    prohibited_trigger: Optional[str] = None
    high_risk_categories: List[str] = Field(default_factory=list)
    compliance_requirements: List[str] = Field(default_factory=list)
    transparency_obligations: List[str] = Field(default_factory=list)
    conformity_assessment_needed: bool = False
    ce_marking_required: bool = False
    human_oversight_required: bool = False
    assessed_by: Optional[str] = None
    notes: Optional[str] = None


class EUAIActAssessmentResponse(BaseModel):
    """EU AI Act assessment record."""

    assessment_id: UUID
    system_id: UUID
    risk_tier: str
    prohibited_trigger: Optional[str] = None
    high_risk_categories: List[str] = Field(default_factory=list)
    compliance_requirements: List[str] = Field(default_factory=list)
    transparency_obligations: List[str] = Field(default_factory=list)
    conformity_assessment_needed: bool = False
    ce_marking_required: bool = False
    human_oversight_required: bool = False
    assessed_by: Optional[str] = None
    assessment_date: datetime
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class EUAIActAssessmentDetail(EUAIActAssessmentResponse):
    """EU AI Act assessment with its full AI system record."""

    ai_system: Optional[AISystemResponse] = None


class EUAIActDashboardStats(BaseModel):
    """System counts per risk classification."""

    total_systems: int
    total_assessments: int
    prohibited: int
    high_risk: int
    limited_risk: int
    minimal_risk: int
    not_assessed: int


class AssessmentSummary(BaseModel):
    """Identifying fields of an assessment."""

    assessment_id: UUID
    assessment_date: datetime
    assessed_by: Optional[str] = None

    class Config:
        from_attributes = True


class EUAIActDashboardSystem(BaseModel):
    """AI system row on the EU AI Act dashboard."""

    system_id: UUID
    system_name: str
    business_owner: Optional[str] = None
    deployment_status: Optional[str] = None
    risk_classification: Optional[str] = None
    last_modified: Optional[datetime] = None
    latest_assessment: Optional[AssessmentSummary] = None

    class Config:
        from_attributes = True


class EUAIActDashboard(BaseModel):
    """EU AI Act dashboard payload."""

    stats: EUAIActDashboardStats
    systems: List[EUAIActDashboardSystem]


# NIST AI RMF Schemas

class NISTAIRMFAssessmentCreate(BaseModel):
    """Request to record a NIST AI RMF assessment."""

    system_id: UUID
    govern_score: float = Field(..., ge=0, le=5)
    map_score: float = Field(..., ge=0, le=5)
    measure_score: float = Field(..., ge=0, le=5)
    manage_score: float = Field(..., ge=0, le=5)
    trustworthy_characteristics: Optional[Dict[str, Any]] = None
    overall_maturity_level: NISTMaturityLevel
    recommendations: List[str] = Field(default_factory=list)
    questionnaire_responses: Optional[Dict[str, Any]] = None
    assessed_by: Optional[str] = None
    notes: Optional[str] = None


class NISTAIRMFAssessmentResponse(BaseModel):
    """NIST AI RMF assessment record."""

    assessment_id: UUID
    system_id: UUID
    govern_score: float
    map_score: float
    measure_score: float
    manage_score: float
    trustworthy_characteristics: Optional[Dict[str, Any]] = None
    overall_maturity_level: str
    recommendations: List[str] = Field(default_factory=list)
    questionnaire_responses: Optional[Dict[str, Any]] = None
    assessed_by: Optional[str] = None
    assessment_date: datetime
    notes: Optional[str] = None
    ai_system: Optional[SystemSummary] = None

    class Config:
        from_attributes = True


# UK AI Regulation Schemas

class UKAIRegulationAssessmentCreate(BaseModel):
    """Request to record a UK AI regulation principles assessment."""

    system_id: UUID
    safety_security_robustness: ImplementationLevel
    transparency_explainability: ImplementationLevel
    fairness: ImplementationLevel
    accountability_governance: ImplementationLevel
    contestability_redress: ImplementationLevel
    sector_specific_requirements: List[str] = Field(default_factory=list)
    overall_compliance_score: float = Field(..., ge=0, le=100)
    gaps_identified: List[str] = Field(default_factory=list)
    questionnaire_responses: Optional[Dict[str, Any]] = None
    assessed_by: Optional[str] = None
    notes: Optional[str] = None


class UKAIRegulationAssessmentResponse(BaseModel):
    """UK AI regulation assessment record."""

    assessment_id: UUID
    system_id: UUID
    safety_security_robustness: str
    transparency_explainability: str
    fairness: str
    accountability_governance: str
    contestability_redress: str
    sector_specific_requirements: List[str] = Field(default_factory=list)
    overall_compliance_score: float
    gaps_identified: List[str] = Field(default_factory=list)
    questionnaire_responses: Optional[Dict[str, Any]] = None
    assessed_by: Optional[str] = None
    assessment_date: datetime
    notes: Optional[str] = None
    ai_system: Optional[SystemSummary] = None

    class Config:
        from_attributes = True


# Cross-Framework Schemas

class CrossFrameworkAnalysisCreate(BaseModel):
    """Request to record a cross-framework analysis."""

    system_id: UUID
    frameworks_assessed: List[str] = Field(..., min_length=1)
    coverage_gaps: List[str] = Field(default_factory=list)
    overlapping_requirements: List[str] = Field(default_factory=list)
    priority_actions: List[str] = Field(default_factory=list)
    compliance_confidence_level: Optional[str] = None
    next_review_date: Optional[date] = None
    assessed_by: Optional[str] = None
    notes: Optional[str] = None


class CrossFrameworkAnalysisResponse(BaseModel):
    """Cross-framework analysis record."""

    analysis_id: UUID
    system_id: UUID
    frameworks_assessed: List[str] = Field(default_factory=list)
    coverage_gaps: List[str] = Field(default_factory=list)
    overlapping_requirements: List[str] = Field(default_factory=list)
    priority_actions: List[str] = Field(default_factory=list)
    compliance_confidence_level: Optional[str] = None
    next_review_date: Optional[date] = None
    assessed_by: Optional[str] = None
    analysis_date: datetime
    notes: Optional[str] = None

    class Config:
        from_attributes = True


# Knowledge Base Schemas

class ArticleFeedbackRequest(BaseModel):
    """Reader feedback on a knowledge base article."""

    feedback: str = Field(..., description="helpful or not_helpful")


class ArticleFeedbackResponse(BaseModel):
    """Updated feedback counters of an article."""

    id: UUID
    helpful_count: int
    not_helpful_count: int

    class Config:
        from_attributes = True


# Error Response Schema

class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str


# Health Check Schema

class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str
