"""Event schemas for governance record changes."""

from datetime import datetime
from typing import Optional, Literal
from uuid import UUID

from pydantic import BaseModel, Field

REMEDIATION_TOPIC = "governance.remediation"
BIAS_TEST_TOPIC = "governance.bias-tests"
EU_AI_ACT_TOPIC = "governance.eu-ai-act"


class BaseEvent(BaseModel):
    """Base event schema with common fields."""

    event_type: str = Field(..., description="Type of event")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Event timestamp")


class RemediationActionUpdatedEvent(BaseEvent):
    """Event emitted when a remediation action is updated."""

    event_type: Literal["remediation_action.updated"] = "remediation_action.updated"
    action_id: UUID = Field(..., description="Updated remediation action")
    test_id: UUID = Field(..., description="Bias test owning the action")
    status: str = Field(..., description="Status after the update")
    assigned_to: Optional[str] = Field(None, description="Current assignee")
    priority: Optional[str] = Field(None, description="Current priority")


class BiasTestRemediationCompleteEvent(BaseEvent):
    """Event emitted when every remediation action of a bias test is completed."""

    event_type: Literal["bias_test.remediation_complete"] = "bias_test.remediation_complete"
    test_id: UUID = Field(..., description="Bias test whose remediation finished")
    system_id: UUID = Field(..., description="AI system the test evaluated")
    completed_action_id: UUID = Field(..., description="Action whose completion closed the test")
    action_count: int = Field(..., ge=1, description="Number of remediation actions on the test")


class EUAIActAssessmentRecordedEvent(BaseEvent):
    """Event emitted when an EU AI Act assessment reclassifies a system."""

    event_type: Literal["eu_ai_act.assessment_recorded"] = "eu_ai_act.assessment_recorded"
    assessment_id: UUID = Field(..., description="New assessment")
    system_id: UUID = Field(..., description="Assessed AI system")
    risk_tier: str = Field(..., description="Risk tier written to the system")
    assessed_by: Optional[str] = Field(None, description="Assessor")
