"""SQLAlchemy database models for the AI governance API."""

import os
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    create_engine,
    Column,
    String,
    Float,
    Integer,
    Date,
    DateTime,
    Text,
    Boolean,
    ForeignKey,
    JSON,
    TypeDecorator,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


# Custom UUID type that works with both PostgreSQL and SQLite
class GUID(TypeDecorator):
    """Platform-independent GUID type.

    Uses PostgreSQL's UUID type, otherwise uses String(36).
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return value
        else:
            return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return value
        else:
            return UUID(value) if isinstance(value, str) else value


class AISystem(Base):
    """An AI system in the organisation's inventory."""

    __tablename__ = "ai_systems"

    system_id = Column(GUID, primary_key=True, default=uuid4)
    system_name = Column(String(255), unique=True, nullable=False, index=True)
    system_purpose = Column(Text, nullable=True)
    business_owner = Column(String(255), nullable=True)
    technical_owner = Column(String(255), nullable=True)
    ai_model_type = Column(String(100), nullable=True)
    deployment_status = Column(String(50), default="DEVELOPMENT")  # PLANNING, DEVELOPMENT, TESTING, PRODUCTION, RETIRED
    deployment_date = Column(Date, nullable=True)
    data_sources = Column(JSON, default=list)
    vendor_provider = Column(String(255), nullable=True)
    risk_classification = Column(String(50), default="NOT_YET_ASSESSED")
    modified_by = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    bias_tests = relationship("BiasTest", back_populates="ai_system", cascade="all, delete-orphan")
    model_cards = relationship("ModelCard", back_populates="ai_system", cascade="all, delete-orphan")
    eu_ai_act_assessments = relationship(
        "EUAIActAssessment",
        back_populates="ai_system",
        cascade="all, delete-orphan",
    )
    cross_framework_analyses = relationship(
        "CrossFrameworkAnalysis",
        back_populates="ai_system",
        cascade="all, delete-orphan",
    )
    nist_ai_rmf_assessments = relationship(
        "NISTAIRMFAssessment",
        back_populates="ai_system",
        cascade="all, delete-orphan",
    )
    uk_ai_regulation_assessments = relationship(
        "UKAIRegulationAssessment",
        back_populates="ai_system",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<AISystem(system_id={self.system_id}, system_name={self.system_name})>"


class BiasTest(Base):
    """Bias and fairness evaluation of an AI system."""

    __tablename__ = "bias_tests"

    test_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)
    test_name = Column(String(255), nullable=False)
    test_type = Column(String(100), nullable=True)
    protected_attributes_tested = Column(JSON, default=list)
    dataset_description = Column(Text, nullable=True)
    sample_size = Column(Integer, nullable=True)
    tested_by = Column(String(255), nullable=True)
    test_methodology = Column(Text, nullable=True)
    test_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    overall_fairness_score = Column(Float, default=0.0)
    issues_detected = Column(Boolean, default=False)
    severity_level = Column(String(50), nullable=True)  # LOW, MEDIUM, HIGH, CRITICAL
    status = Column(String(50), default="PLANNED")
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    ai_system = relationship("AISystem", back_populates="bias_tests")
    remediation_actions = relationship(
        "RemediationAction",
        back_populates="bias_test",
        cascade="all, delete-orphan",
        order_by="RemediationAction.priority",
    )

    def __repr__(self):
        return f"<BiasTest(test_id={self.test_id}, test_name={self.test_name}, status={self.status})>"


class RemediationAction(Base):
    """Corrective task addressing a bias test finding."""

    __tablename__ = "remediation_actions"

    action_id = Column(GUID, primary_key=True, default=uuid4)
    test_id = Column(GUID, ForeignKey("bias_tests.test_id"), nullable=False, index=True)
    issue_description = Column(Text, nullable=True)
    recommended_action = Column(Text, nullable=True)
    assigned_to = Column(String(255), nullable=True)
    priority = Column(String(50), nullable=True)  # HIGH, MEDIUM, LOW
    status = Column(String(50), default="NOT_STARTED", nullable=False)
    due_date = Column(Date, nullable=True)
    completion_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    follow_up_test_required = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    bias_test = relationship("BiasTest", back_populates="remediation_actions")

    def __repr__(self):
        return (
            f"<RemediationAction(action_id={self.action_id}, test_id={self.test_id}, "
            f"status={self.status})>"
        )


class ModelCard(Base):
    """Versioned documentation card for an AI system's model."""

    __tablename__ = "model_cards"

    card_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)
    card_version = Column(String(50), default="1.0")
    status = Column(String(50), default="DRAFT")  # DRAFT, UNDER_REVIEW, APPROVED, PUBLISHED

    model_overview = Column(Text, nullable=True)
    intended_use = Column(Text, nullable=True)
    limitations = Column(Text, nullable=True)
    ethical_considerations = Column(Text, nullable=True)

    updated_by = Column(String(255), nullable=True)
    approved_by = Column(String(255), nullable=True)
    approval_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationships
    ai_system = relationship("AISystem", back_populates="model_cards")

    def __repr__(self):
        return f"<ModelCard(card_id={self.card_id}, version={self.card_version}, status={self.status})>"


class EUAIActAssessment(Base):
    """EU AI Act risk tier assessment of an AI system."""

    __tablename__ = "eu_ai_act_assessments"

    assessment_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)
    risk_tier = Column(String(50), nullable=False)  # PROHIBITED, HIGH_RISK, LIMITED_RISK, MINIMAL_RISK
    prohibited_trigger = Column(Text, nullable=True)
    high_risk_categories = Column(JSON, default=list)
    compliance_requirements = Column(JSON, default=list)
    transparency_obligations = Column(JSON, default=list)
    conformity_assessment_needed = Column(Boolean, default=False)
    ce_marking_required = Column(Boolean, default=False)
    human_oversight_required = Column(Boolean, default=False)
    assessed_by = Column(String(255), nullable=True)
    assessment_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    ai_system = relationship("AISystem", back_populates="eu_ai_act_assessments")

    def __repr__(self):
        return f"<EUAIActAssessment(assessment_id={self.assessment_id}, risk_tier={self.risk_tier})>"


class NISTAIRMFAssessment(Base):
    """NIST AI Risk Management Framework maturity assessment of an AI system."""

    __tablename__ = "nist_ai_rmf_assessments"

    assessment_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)

    # Function scores on a 0-5 scale
    govern_score = Column(Float, nullable=False)
    map_score = Column(Float, nullable=False)
    measure_score = Column(Float, nullable=False)
    manage_score = Column(Float, nullable=False)

    trustworthy_characteristics = Column(JSON, nullable=True)
    overall_maturity_level = Column(String(50), nullable=False)  # INITIAL, DEVELOPING, DEFINED, MANAGED, OPTIMISING
    recommendations = Column(JSON, default=list)
    questionnaire_responses = Column(JSON, nullable=True)
    assessed_by = Column(String(255), nullable=True)
    assessment_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    ai_system = relationship("AISystem", back_populates="nist_ai_rmf_assessments")

    def __repr__(self):
        return (
            f"<NISTAIRMFAssessment(assessment_id={self.assessment_id}, "
            f"maturity={self.overall_maturity_level})>"
        )


class UKAIRegulationAssessment(Base):
    """UK AI regulation principles assessment of an AI system."""

    __tablename__ = "uk_ai_regulation_assessments"

    assessment_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)

    # Principle levels: NOT_ADDRESSED, PARTIALLY_ADDRESSED, FULLY_ADDRESSED
    safety_security_robustness = Column(String(50), nullable=False)
    transparency_explainability = Column(String(50), nullable=False)
    fairness = Column(String(50), nullable=False)
    accountability_governance = Column(String(50), nullable=False)
    contestability_redress = Column(String(50), nullable=False)

    sector_specific_requirements = Column(JSON, default=list)
    overall_compliance_score = Column(Float, nullable=False)  # 0-100
    gaps_identified = Column(JSON, default=list)
    questionnaire_responses = Column(JSON, nullable=True)
    assessed_by = Column(String(255), nullable=True)
    assessment_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    ai_system = relationship("AISystem", back_populates="uk_ai_regulation_assessments")

    def __repr__(self):
        return (
            f"<UKAIRegulationAssessment(assessment_id={self.assessment_id}, "
            f"score={self.overall_compliance_score})>"
        )


class CrossFrameworkAnalysis(Base):
    """Coverage analysis of an AI system across regulatory frameworks."""

    __tablename__ = "cross_framework_analyses"

    analysis_id = Column(GUID, primary_key=True, default=uuid4)
    system_id = Column(GUID, ForeignKey("ai_systems.system_id"), nullable=False, index=True)
    frameworks_assessed = Column(JSON, default=list)
    coverage_gaps = Column(JSON, default=list)
    overlapping_requirements = Column(JSON, default=list)
    priority_actions = Column(JSON, default=list)
    compliance_confidence_level = Column(String(50), nullable=True)
    next_review_date = Column(Date, nullable=True)
    assessed_by = Column(String(255), nullable=True)
    analysis_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    ai_system = relationship("AISystem", back_populates="cross_framework_analyses")

    def __repr__(self):
        return f"<CrossFrameworkAnalysis(analysis_id={self.analysis_id}, system_id={self.system_id})>"


class KnowledgeBaseArticle(Base):
    """Knowledge base article with reader feedback counters."""

    __tablename__ = "knowledge_base_articles"

    id = Column(GUID, primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    status = Column(String(50), default="DRAFT")  # DRAFT, PUBLISHED, ARCHIVED
    helpful_count = Column(Integer, default=0, nullable=False)
    not_helpful_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<KnowledgeBaseArticle(id={self.id}, title={self.title}, status={self.status})>"


def get_db_engine(database_url: Optional[str] = None):
    """
    Get SQLAlchemy database engine.

    Args:
        database_url: Database connection URL (defaults to env var DATABASE_URL)

    Returns:
        SQLAlchemy engine instance
    """
    if database_url is None:
        database_url = os.getenv("DATABASE_URL", "sqlite:///./ai_governance.db")

    # Special handling for SQLite (for development/testing)
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, pool_pre_ping=True)

    return engine


def init_db(database_url: Optional[str] = None, drop_all: bool = False):
    """
    Initialize database tables.

    Args:
        database_url: Database connection URL
        drop_all: If True, drop all tables before creating (WARNING: destructive!)
    """
    engine = get_db_engine(database_url)

    if drop_all:
        Base.metadata.drop_all(engine)

    Base.metadata.create_all(engine)
    return engine


def get_session_maker(database_url: Optional[str] = None, engine=None):
    """
    Get SQLAlchemy session maker.

    Args:
        database_url: Database connection URL
        engine: Existing engine to bind to (takes precedence over database_url)

    Returns:
        SQLAlchemy sessionmaker instance
    """
    if engine is None:
        engine = get_db_engine(database_url)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
