"""Service layer for the AI governance API."""

from .exceptions import RecordNotFoundError, DuplicateRecordError, InvalidOperationError
from .record_reader import get_record_by_id, get_latest_record, list_records
from .remediation_service import (
    update_remediation_action,
    create_remediation_action,
    list_remediation_actions,
)
from .bias_test_service import (
    list_bias_tests,
    get_bias_test,
    create_bias_test,
    update_bias_test,
    delete_bias_test,
    get_bias_test_dashboard,
)
from .ai_system_service import (
    list_ai_systems,
    get_ai_system,
    create_ai_system,
    update_ai_system,
    delete_ai_system,
    export_ai_systems_csv,
)
from .model_card_service import (
    list_model_cards,
    get_model_card,
    get_latest_model_card,
    list_model_card_versions,
    create_model_card,
    update_model_card,
    delete_model_card,
    get_model_card_dashboard,
)
from .assessment_service import (
    get_eu_ai_act_dashboard,
    list_eu_ai_act_assessments,
    get_eu_ai_act_assessment,
    get_latest_eu_ai_act_assessment,
    create_eu_ai_act_assessment,
    list_cross_framework_analyses,
    get_latest_cross_framework_analysis,
    create_cross_framework_analysis,
)
from .framework_assessment_service import (
    list_nist_ai_rmf_assessments,
    get_latest_nist_ai_rmf_assessment,
    create_nist_ai_rmf_assessment,
    list_uk_ai_regulation_assessments,
    get_latest_uk_ai_regulation_assessment,
    create_uk_ai_regulation_assessment,
)
from .knowledge_base_service import submit_article_feedback

__all__ = [
    # Errors
    "RecordNotFoundError",
    "DuplicateRecordError",
    "InvalidOperationError",
    # Record reader
    "get_record_by_id",
    "get_latest_record",
    "list_records",
    # Remediation
    "update_remediation_action",
    "create_remediation_action",
    "list_remediation_actions",
    # Bias tests
    "list_bias_tests",
    "get_bias_test",
    "create_bias_test",
    "update_bias_test",
    "delete_bias_test",
    "get_bias_test_dashboard",
    # AI systems
    "list_ai_systems",
    "get_ai_system",
    "create_ai_system",
    "update_ai_system",
    "delete_ai_system",
    "export_ai_systems_csv",
    # Model cards
    "list_model_cards",
    "get_model_card",
    "get_latest_model_card",
    "list_model_card_versions",
    "create_model_card",
    "update_model_card",
    "delete_model_card",
    "get_model_card_dashboard",
    # Assessments
    "get_eu_ai_act_dashboard",
    "list_eu_ai_act_assessments",
    "get_eu_ai_act_assessment",
    "get_latest_eu_ai_act_assessment",
    "create_eu_ai_act_assessment",
    "list_cross_framework_analyses",
    "get_latest_cross_framework_analysis",
    "create_cross_framework_analysis",
    # NIST AI RMF and UK AI regulation
    "list_nist_ai_rmf_assessments",
    "get_latest_nist_ai_rmf_assessment",
    "create_nist_ai_rmf_assessment",
    "list_uk_ai_regulation_assessments",
    "get_latest_uk_ai_regulation_assessment",
    "create_uk_ai_regulation_assessment",
    # Knowledge base
    "submit_article_feedback",
]
