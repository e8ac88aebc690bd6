"""Event streaming module for governance record changes."""

from .redpanda_client import EventProducer, create_event_producer
from .schemas import (
    REMEDIATION_TOPIC,
    BIAS_TEST_TOPIC,
    EU_AI_ACT_TOPIC,
    BaseEvent,
    RemediationActionUpdatedEvent,
    BiasTestRemediationCompleteEvent,
    EUAIActAssessmentRecordedEvent,
)

__all__ = [
    "EventProducer",
    "create_event_producer",
    "REMEDIATION_TOPIC",
    "BIAS_TEST_TOPIC",
    "EU_AI_ACT_TOPIC",
    "BaseEvent",
    "RemediationActionUpdatedEvent",
    "BiasTestRemediationCompleteEvent",
    "EUAIActAssessmentRecordedEvent",
]
