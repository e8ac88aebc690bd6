"""Tests for the HTTP API routes."""

import csv
import io
from datetime import date, datetime
from unittest.mock import patch
from uuid import uuid4

import pytest

from governance_api.events import EU_AI_ACT_TOPIC, EUAIActAssessmentRecordedEvent
from governance_api.models import (
    AISystem,
    EUAIActAssessment,
    KnowledgeBaseArticle,
    ModelCard,
    NISTAIRMFAssessment,
    RemediationAction,
)


@pytest.fixture
def add_card(db_session):
    """Factory adding a model card and returning its id."""

    def _add(system_id, last_updated, card_version="1.0", status="DRAFT"):
        card = ModelCard(
            system_id=system_id,
            card_version=card_version,
            status=status,
            last_updated=last_updated,
            updated_by="ML Platform Team",
        )
        db_session.add(card)
        db_session.commit()
        return card.card_id

    return _add


@pytest.fixture
def add_article(db_session):
    """Factory adding a knowledge base article and returning its id."""

    def _add(status="PUBLISHED"):
        article = KnowledgeBaseArticle(title="Bias testing 101", status=status)
        db_session.add(article)
        db_session.commit()
        return article.id

    return _add


class TestRemediationRoutes:
    """Test /api/remediation-actions."""

    def test_update_returns_action(self, client, make_bias_test):
        """Test that PUT returns the updated action."""
        test_id, (a1,) = make_bias_test(["PENDING"])

        response = client.put(
            f"/api/remediation-actions/{a1}",
            json={"status": "IN_PROGRESS", "assigned_to": "Jordan", "due_date": "2025-06-30"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["action_id"] == str(a1)
        assert data["test_id"] == str(test_id)
        assert data["status"] == "IN_PROGRESS"
        assert data["assigned_to"] == "Jordan"
        assert data["due_date"] == "2025-06-30"

    def test_completing_last_action_completes_bias_test(self, client, make_bias_test):
        """Test that the cascade is visible through the bias test route."""
        test_id, (a1, a2) = make_bias_test(["COMPLETED", "PENDING"])

        response = client.put(f"/api/remediation-actions/{a2}", json={"status": "COMPLETED"})
        assert response.status_code == 200

        test = client.get(f"/api/bias-tests/{test_id}").json()
        assert test["status"] == "REMEDIATION_COMPLETE"
        assert {a["status"] for a in test["remediation_actions"]} == {"COMPLETED"}

    def test_open_sibling_keeps_bias_test_status(self, client, make_bias_test):
        """Test that the bias test is untouched while actions remain open."""
        test_id, (a1, a2) = make_bias_test(["PENDING", "PENDING"])

        client.put(f"/api/remediation-actions/{a1}", json={"status": "COMPLETED"})

        test = client.get(f"/api/bias-tests/{test_id}").json()
        assert test["status"] == "REMEDIATION_NEEDED"

    def test_update_emits_events(self, client, make_bias_test, event_producer):
        """Test that the app's event producer receives update events."""
        test_id, (a1,) = make_bias_test(["PENDING"])

        client.put(f"/api/remediation-actions/{a1}", json={"status": "COMPLETED"})

        topics = [c.args[0] for c in event_producer.emit.call_args_list]
        assert topics == ["governance.remediation", "governance.bias-tests"]

    def test_update_unknown_action_returns_404(self, client, event_producer):
        """Test that an unknown action id returns 404."""
        response = client.put(
            f"/api/remediation-actions/{uuid4()}", json={"status": "COMPLETED"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Remediation action not found"
        event_producer.emit.assert_not_called()

    def test_update_invalid_status_returns_422(self, client, make_bias_test):
        """Test that an unknown status value is rejected."""
        test_id, (a1,) = make_bias_test(["PENDING"])

        response = client.put(f"/api/remediation-actions/{a1}", json={"status": "DONE"})
        assert response.status_code == 422

    def test_update_malformed_id_returns_422(self, client):
        """Test that a non-UUID path parameter is rejected."""
        response = client.put("/api/remediation-actions/not-a-uuid", json={"status": "COMPLETED"})
        assert response.status_code == 422

    def test_update_malformed_date_returns_422(self, client, make_bias_test):
        """Test that an unparseable date is rejected."""
        test_id, (a1,) = make_bias_test(["PENDING"])

        response = client.put(f"/api/remediation-actions/{a1}", json={"due_date": "next week"})
        assert response.status_code == 422

    def test_store_failure_returns_generic_500(self, client, make_bias_test):
        """Test that store errors return 500 without leaking details or writing."""
        test_id, (a1,) = make_bias_test(["PENDING"])

        with patch(
            "governance_api.services.remediation_service._cascade_completion",
            side_effect=RuntimeError("deadlock on bias_tests"),
        ):
            response = client.put(f"/api/remediation-actions/{a1}", json={"status": "COMPLETED"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to update remediation action"}

        test = client.get(f"/api/bias-tests/{test_id}").json()
        assert test["remediation_actions"][0]["status"] == "PENDING"

    def test_list_includes_test_and_system_names(self, client, make_system, make_bias_test):
        """Test that listed actions carry their bias test and system names."""
        system_id = make_system("Claims Triage")
        test_id, (a1,) = make_bias_test(["PENDING"], system_id=system_id)

        response = client.get("/api/remediation-actions", params={"test_id": str(test_id)})

        assert response.status_code == 200
        [item] = response.json()
        assert item["action_id"] == str(a1)
        assert item["test_name"] == "Gender parity in approvals"
        assert item["system_name"] == "Claims Triage"

    def test_list_filters_by_status(self, client, make_bias_test):
        """Test the status query filter."""
        make_bias_test(["PENDING", "COMPLETED", "COMPLETED"])

        response = client.get("/api/remediation-actions", params={"status": "COMPLETED"})

        assert len(response.json()) == 2

    def test_create_action(self, client, make_bias_test):
        """Test creating an action under a bias test."""
        test_id, _ = make_bias_test([])

        response = client.post(
            "/api/remediation-actions",
            json={"test_id": str(test_id), "issue_description": "Label noise", "priority": "LOW"},
        )

        assert response.status_code == 201
        assert response.json()["status"] == "NOT_STARTED"

    def test_create_action_unknown_test(self, client):
        """Test that creating under an unknown bias test returns 404."""
        response = client.post("/api/remediation-actions", json={"test_id": str(uuid4())})

        assert response.status_code == 404
        assert response.json()["detail"] == "Bias test not found"

    def test_orphan_action_update_returns_200(self, client, db_session, event_producer):
        """Test that completing an action without a bias test succeeds without cascading."""
        orphan_id = uuid4()
        db_session.add(RemediationAction(action_id=orphan_id, test_id=uuid4(), status="PENDING"))
        db_session.commit()

        response = client.put(
            f"/api/remediation-actions/{orphan_id}", json={"status": "COMPLETED"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"
        topics = [c.args[0] for c in event_producer.emit.call_args_list]
        assert topics == ["governance.remediation"]

    def test_list_orphan_action_has_no_names(self, client, db_session):
        """Test that an action without a bias test is listed with empty names."""
        orphan_id = uuid4()
        db_session.add(RemediationAction(action_id=orphan_id, test_id=uuid4(), status="PENDING"))
        db_session.commit()

        response = client.get("/api/remediation-actions")

        assert response.status_code == 200
        [item] = response.json()
        assert item["action_id"] == str(orphan_id)
        assert item["test_name"] is None
        assert item["system_name"] is None


class TestBiasTestRoutes:
    """Test /api/bias-tests."""

    def test_dashboard(self, client):
        """Test the dashboard payload shape."""
        response = client.get("/api/bias-tests/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["stats"]["total_tests"] == 0
        assert data["systems_with_issues"] == []
        assert data["recent_tests"] == []

    def test_create_with_actions(self, client, make_system):
        """Test recording a bias test with its remediation actions."""
        system_id = make_system()

        response = client.post(
            "/api/bias-tests",
            json={
                "system_id": str(system_id),
                "test_name": "Disparate impact",
                "protected_attributes_tested": ["age", "gender"],
                "issues_detected": True,
                "status": "REMEDIATION_NEEDED",
                "remediation_actions": [
                    {"issue_description": "Age gap", "priority": "HIGH"},
                    {"issue_description": "Gender gap", "priority": "MEDIUM"},
                ],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "REMEDIATION_NEEDED"
        assert len(data["remediation_actions"]) == 2
        assert all(a["status"] == "NOT_STARTED" for a in data["remediation_actions"])

    def test_create_for_unknown_system(self, client):
        """Test that an unknown system returns 404."""
        response = client.post(
            "/api/bias-tests", json={"system_id": str(uuid4()), "test_name": "Orphan"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "AI system not found"

    def test_get_includes_system_summary(self, client, make_system, make_bias_test):
        """Test that a bias test is returned with its AI system."""
        system_id = make_system("Loan Approver")
        test_id, _ = make_bias_test(["PENDING"], system_id=system_id)

        data = client.get(f"/api/bias-tests/{test_id}").json()

        assert data["ai_system"]["system_name"] == "Loan Approver"
        assert data["test_date"].startswith("2025-01-15")

    def test_get_unknown_returns_404(self, client):
        """Test that an unknown bias test returns 404."""
        response = client.get(f"/api/bias-tests/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Test not found"

    def test_list_filters(self, client, make_system, make_bias_test):
        """Test listing by system and status."""
        system_id = make_system()
        make_bias_test([], system_id=system_id)
        make_bias_test([], status="PLANNED", system_id=system_id)
        make_bias_test([])

        by_system = client.get("/api/bias-tests", params={"system_id": str(system_id)}).json()
        assert len(by_system) == 2

        planned = client.get("/api/bias-tests", params={"status": "PLANNED"}).json()
        assert len(planned) == 1

    def test_update_and_delete(self, client, make_bias_test):
        """Test updating then deleting a bias test."""
        test_id, _ = make_bias_test(["PENDING"])

        response = client.put(f"/api/bias-tests/{test_id}", json={"severity_level": "LOW"})
        assert response.status_code == 200
        assert response.json()["severity_level"] == "LOW"
        assert response.json()["test_name"] == "Gender parity in approvals"

        response = client.delete(f"/api/bias-tests/{test_id}")
        assert response.json() == {"success": True}
        assert client.get(f"/api/bias-tests/{test_id}").status_code == 404


class TestModelCardRoutes:
    """Test /api/model-cards."""

    def test_latest_returns_most_recent(self, client, make_system, add_card):
        """Test that the most recently updated card is returned."""
        system_id = make_system()
        add_card(system_id, datetime(2025, 1, 1), card_version="1.0")
        newest = add_card(system_id, datetime(2025, 5, 1), card_version="2.0")

        response = client.get(f"/api/model-cards/latest/{system_id}")

        assert response.status_code == 200
        assert response.json()["card_id"] == str(newest)
        assert response.json()["card_version"] == "2.0"

    def test_latest_without_cards_returns_404(self, client, make_system):
        """Test that a system without cards returns 404."""
        response = client.get(f"/api/model-cards/latest/{make_system()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "No model card found for this system"

    def test_latest_store_failure_returns_generic_500(self, client, make_system):
        """Test that an unexpected error is reported without its message."""
        with patch(
            "governance_api.api.model_card_routes.get_latest_model_card",
            side_effect=RuntimeError("password=hunter2"),
        ):
            response = client.get(f"/api/model-cards/latest/{make_system()}")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch latest model card"}

    def test_latest_malformed_id_returns_422(self, client):
        """Test that a non-UUID system id is rejected."""
        response = client.get("/api/model-cards/latest/12345")
        assert response.status_code == 422

    def test_versions_newest_first(self, client, make_system, add_card):
        """Test the version history projection."""
        system_id = make_system()
        add_card(system_id, datetime(2025, 1, 1), card_version="1.0")
        add_card(system_id, datetime(2025, 2, 1), card_version="1.1", status="APPROVED")

        response = client.get(f"/api/model-cards/versions/{system_id}")

        assert response.status_code == 200
        versions = response.json()
        assert [v["card_version"] for v in versions] == ["1.1", "1.0"]
        assert set(versions[0]) == {
            "card_id",
            "card_version",
            "status",
            "last_updated",
            "updated_by",
            "approved_by",
            "approval_date",
        }

    def test_versions_empty(self, client, make_system):
        """Test that a system without cards has an empty history."""
        response = client.get(f"/api/model-cards/versions/{make_system()}")

        assert response.status_code == 200
        assert response.json() == []

    def test_get_card_includes_system_detail(self, client, make_system, add_card):
        """Test that a card is returned with its AI system detail."""
        system_id = make_system("Resume Screener", data_sources=["ATS exports"])
        card_id = add_card(system_id, datetime(2025, 1, 1))

        data = client.get(f"/api/model-cards/{card_id}").json()

        assert data["ai_system"]["system_name"] == "Resume Screener"
        assert data["ai_system"]["data_sources"] == ["ATS exports"]

    def test_get_unknown_card_returns_404(self, client):
        """Test that an unknown card returns 404."""
        response = client.get(f"/api/model-cards/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Model card not found"

    def test_create_update_delete(self, client, make_system):
        """Test the model card lifecycle."""
        system_id = make_system()

        created = client.post(
            "/api/model-cards",
            json={"system_id": str(system_id), "intended_use": "Triage"},
        )
        assert created.status_code == 201
        card_id = created.json()["card_id"]

        updated = client.put(
            f"/api/model-cards/{card_id}",
            json={"status": "APPROVED", "approved_by": "Risk Committee"},
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == "APPROVED"
        assert updated.json()["intended_use"] == "Triage"
        assert updated.json()["last_updated"] >= created.json()["last_updated"]

        deleted = client.delete(f"/api/model-cards/{card_id}")
        assert deleted.json() == {"message": "Model card deleted successfully"}
        assert client.get(f"/api/model-cards/{card_id}").status_code == 404

    def test_dashboard_counts_and_coverage(self, client, make_system, add_card):
        """Test card counts per status and systems lacking a published card."""
        published = make_system("Alpha Scorer")
        drafted = make_system("Beta Scorer")
        make_system("Chatbot")
        add_card(published, datetime(2025, 1, 1), status="PUBLISHED")
        add_card(published, datetime(2025, 3, 1), card_version="2.0")
        add_card(drafted, datetime(2025, 2, 1))

        response = client.get("/api/model-cards/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {
            "total_cards": 3,
            "draft_cards": 2,
            "under_review_cards": 0,
            "approved_cards": 0,
            "published_cards": 1,
            "total_systems": 3,
            "systems_with_cards": 2,
            "undocumented_systems": 1,
        }
        assert [s["system_name"] for s in data["systems_needing_documentation"]] == [
            "Beta Scorer",
            "Chatbot",
        ]
        assert [c["card_version"] for c in data["recent_cards"]] == ["2.0", "1.0", "1.0"]
        assert data["recent_cards"][0]["ai_system"]["system_name"] == "Alpha Scorer"

    def test_dashboard_empty(self, client):
        """Test the dashboard with no systems or cards."""
        data = client.get("/api/model-cards/dashboard").json()

        assert data["stats"]["total_cards"] == 0
        assert data["stats"]["undocumented_systems"] == 0
        assert data["systems_needing_documentation"] == []
        assert data["recent_cards"] == []


class TestEUAIActRoutes:
    """Test /api/eu-ai-act assessments and dashboard."""

    def test_create_reclassifies_system(self, client, make_system, session_maker, event_producer):
        """Test that recording an assessment updates the system and emits an event."""
        system_id = make_system()

        response = client.post(
            "/api/eu-ai-act/assessments",
            json={
                "system_id": str(system_id),
                "risk_tier": "HIGH_RISK",
                "high_risk_categories": ["Creditworthiness"],
                "assessed_by": "Compliance Office",
            },
        )

        assert response.status_code == 201
        assert response.json()["risk_tier"] == "HIGH_RISK"

        with session_maker() as session:
            system = session.get(AISystem, system_id)
            assert system.risk_classification == "HIGH_RISK"
            assert system.modified_by == "Compliance Office"

        topic, event = event_producer.emit.call_args.args
        assert topic == EU_AI_ACT_TOPIC
        assert isinstance(event, EUAIActAssessmentRecordedEvent)
        assert event.system_id == system_id

    def test_create_for_unknown_system(self, client, event_producer):
        """Test that an unknown system returns 404 and nothing is emitted."""
        response = client.post(
            "/api/eu-ai-act/assessments",
            json={"system_id": str(uuid4()), "risk_tier": "MINIMAL_RISK"},
        )

        assert response.status_code == 404
        event_producer.emit.assert_not_called()

    def test_latest_and_detail(self, client, make_system, db_session):
        """Test latest lookup and the detail view with the AI system."""
        system_id = make_system("Face Match")
        older = EUAIActAssessment(
            system_id=system_id, risk_tier="LIMITED_RISK", assessment_date=datetime(2024, 6, 1)
        )
        newer = EUAIActAssessment(
            system_id=system_id, risk_tier="HIGH_RISK", assessment_date=datetime(2025, 2, 1)
        )
        db_session.add_all([older, newer])
        db_session.commit()

        latest = client.get(f"/api/eu-ai-act/assessments/latest/{system_id}").json()
        assert latest["assessment_id"] == str(newer.assessment_id)

        detail = client.get(f"/api/eu-ai-act/assessments/{older.assessment_id}").json()
        assert detail["risk_tier"] == "LIMITED_RISK"
        assert detail["ai_system"]["system_name"] == "Face Match"

        listed = client.get(
            "/api/eu-ai-act/assessments", params={"system_id": str(system_id)}
        ).json()
        assert [a["risk_tier"] for a in listed] == ["HIGH_RISK", "LIMITED_RISK"]

    def test_latest_without_assessments_returns_404(self, client, make_system):
        """Test that a never-assessed system returns 404."""
        response = client.get(f"/api/eu-ai-act/assessments/latest/{make_system()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "No assessment found for this system"

    def test_get_unknown_assessment_returns_404(self, client):
        """Test that an unknown assessment returns 404."""
        response = client.get(f"/api/eu-ai-act/assessments/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Assessment not found"

    def test_dashboard_counts_and_latest_assessment(self, client, make_system, db_session):
        """Test risk classification counts and each system's latest assessment."""
        high = make_system(
            "Credit Scorer",
            risk_classification="HIGH_RISK",
            last_modified=datetime(2025, 3, 1),
        )
        make_system(
            "Chatbot",
            risk_classification="LIMITED_RISK",
            last_modified=datetime(2025, 2, 1),
        )
        make_system("Spam Filter", last_modified=datetime(2025, 1, 1))
        older = EUAIActAssessment(
            system_id=high, risk_tier="LIMITED_RISK", assessment_date=datetime(2024, 6, 1)
        )
        newer = EUAIActAssessment(
            system_id=high,
            risk_tier="HIGH_RISK",
            assessment_date=datetime(2025, 2, 1),
            assessed_by="Compliance Office",
        )
        db_session.add_all([older, newer])
        db_session.commit()

        response = client.get("/api/eu-ai-act/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {
            "total_systems": 3,
            "total_assessments": 2,
            "prohibited": 0,
            "high_risk": 1,
            "limited_risk": 1,
            "minimal_risk": 0,
            "not_assessed": 1,
        }
        assert [s["system_name"] for s in data["systems"]] == [
            "Credit Scorer",
            "Chatbot",
            "Spam Filter",
        ]
        latest = data["systems"][0]["latest_assessment"]
        assert latest["assessment_id"] == str(newer.assessment_id)
        assert latest["assessed_by"] == "Compliance Office"
        assert data["systems"][2]["latest_assessment"] is None

    def test_dashboard_store_failure_returns_generic_500(self, client):
        """Test that dashboard errors return a fixed message."""
        with patch(
            "governance_api.api.assessment_routes.get_eu_ai_act_dashboard",
            side_effect=RuntimeError("connection reset"),
        ):
            response = client.get("/api/eu-ai-act/dashboard")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch dashboard data"}


class TestCrossFrameworkRoutes:
    """Test /api/cross-framework/analysis."""

    def test_create_and_latest(self, client, make_system):
        """Test recording an analysis and fetching the latest one."""
        system_id = make_system()

        created = client.post(
            "/api/cross-framework/analysis",
            json={
                "system_id": str(system_id),
                "frameworks_assessed": ["EU AI Act", "NIST AI RMF"],
                "next_review_date": "2026-01-31",
            },
        )
        assert created.status_code == 201

        latest = client.get(f"/api/cross-framework/analysis/latest/{system_id}").json()
        assert latest["analysis_id"] == created.json()["analysis_id"]
        assert latest["next_review_date"] == "2026-01-31"

    def test_frameworks_required(self, client, make_system):
        """Test that at least one framework must be named."""
        response = client.post(
            "/api/cross-framework/analysis",
            json={"system_id": str(make_system()), "frameworks_assessed": []},
        )
        assert response.status_code == 422

    def test_latest_without_analyses_returns_404(self, client, make_system):
        """Test that a system without analyses returns 404."""
        response = client.get(f"/api/cross-framework/analysis/latest/{make_system()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "No analysis found for this system"


class TestNISTAIRMFRoutes:
    """Test /api/nist-ai-rmf/assessments."""

    def _payload(self, system_id, **overrides):
        payload = {
            "system_id": str(system_id),
            "govern_score": 3.5,
            "map_score": 3.0,
            "measure_score": 2.5,
            "manage_score": 2.0,
            "overall_maturity_level": "DEFINED",
            "recommendations": ["Document model monitoring thresholds"],
            "assessed_by": "Risk Office",
        }
        payload.update(overrides)
        return payload

    def test_create_and_list(self, client, make_system):
        """Test recording an assessment and listing it with its AI system."""
        system_id = make_system("Credit Scorer")

        created = client.post("/api/nist-ai-rmf/assessments", json=self._payload(system_id))

        assert created.status_code == 201
        data = created.json()
        assert data["overall_maturity_level"] == "DEFINED"
        assert data["recommendations"] == ["Document model monitoring thresholds"]

        listed = client.get("/api/nist-ai-rmf/assessments").json()
        assert [a["assessment_id"] for a in listed] == [data["assessment_id"]]
        assert listed[0]["ai_system"]["system_name"] == "Credit Scorer"

    def test_list_filters_by_system_newest_first(self, client, make_system, db_session):
        """Test the system filter and newest-first ordering."""
        system_id = make_system()
        for month, level in ((1, "INITIAL"), (4, "MANAGED"), (2, "DEVELOPING")):
            db_session.add(
                NISTAIRMFAssessment(
                    system_id=system_id,
                    govern_score=1,
                    map_score=1,
                    measure_score=1,
                    manage_score=1,
                    overall_maturity_level=level,
                    assessment_date=datetime(2025, month, 1),
                )
            )
        db_session.commit()
        client.post("/api/nist-ai-rmf/assessments", json=self._payload(make_system()))

        listed = client.get(
            "/api/nist-ai-rmf/assessments", params={"system_id": str(system_id)}
        ).json()
        assert [a["overall_maturity_level"] for a in listed] == [
            "MANAGED",
            "DEVELOPING",
            "INITIAL",
        ]

        latest = client.get(f"/api/nist-ai-rmf/assessments/latest/{system_id}").json()
        assert latest["overall_maturity_level"] == "MANAGED"

    def test_create_for_unknown_system(self, client):
        """Test that an unknown system returns 404."""
        response = client.post("/api/nist-ai-rmf/assessments", json=self._payload(uuid4()))

        assert response.status_code == 404
        assert response.json()["detail"] == "AI system not found"

    def test_score_out_of_range_returns_422(self, client, make_system):
        """Test that function scores are bounded to 0-5."""
        response = client.post(
            "/api/nist-ai-rmf/assessments",
            json=self._payload(make_system(), govern_score=7),
        )
        assert response.status_code == 422

    def test_unknown_maturity_level_returns_422(self, client, make_system):
        """Test that the maturity level must be a known value."""
        response = client.post(
            "/api/nist-ai-rmf/assessments",
            json=self._payload(make_system(), overall_maturity_level="EXPERT"),
        )
        assert response.status_code == 422

    def test_latest_without_assessments_returns_404(self, client, make_system):
        """Test that a never-assessed system returns 404."""
        response = client.get(f"/api/nist-ai-rmf/assessments/latest/{make_system()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "No assessment found for this system"


class TestUKAIRegulationRoutes:
    """Test /api/uk-ai-regulation/assessments."""

    def _payload(self, system_id, **overrides):
        payload = {
            "system_id": str(system_id),
            "safety_security_robustness": "FULLY_ADDRESSED",
            "transparency_explainability": "PARTIALLY_ADDRESSED",
            "fairness": "PARTIALLY_ADDRESSED",
            "accountability_governance": "FULLY_ADDRESSED",
            "contestability_redress": "NOT_ADDRESSED",
            "sector_specific_requirements": ["FCA Consumer Duty"],
            "overall_compliance_score": 62.5,
            "gaps_identified": ["No appeal route for automated declines"],
        }
        payload.update(overrides)
        return payload

    def test_create_and_latest(self, client, make_system):
        """Test recording an assessment and fetching the latest one."""
        system_id = make_system("Claims Triage")

        created = client.post("/api/uk-ai-regulation/assessments", json=self._payload(system_id))

        assert created.status_code == 201
        data = created.json()
        assert data["contestability_redress"] == "NOT_ADDRESSED"
        assert data["overall_compliance_score"] == 62.5
        assert data["ai_system"]["system_name"] == "Claims Triage"

        latest = client.get(f"/api/uk-ai-regulation/assessments/latest/{system_id}").json()
        assert latest["assessment_id"] == data["assessment_id"]
        assert latest["gaps_identified"] == ["No appeal route for automated declines"]

        listed = client.get(
            "/api/uk-ai-regulation/assessments", params={"system_id": str(system_id)}
        ).json()
        assert len(listed) == 1

    def test_create_for_unknown_system(self, client):
        """Test that an unknown system returns 404."""
        response = client.post("/api/uk-ai-regulation/assessments", json=self._payload(uuid4()))

        assert response.status_code == 404
        assert response.json()["detail"] == "AI system not found"

    def test_unknown_implementation_level_returns_422(self, client, make_system):
        """Test that principle ratings must be known implementation levels."""
        response = client.post(
            "/api/uk-ai-regulation/assessments",
            json=self._payload(make_system(), fairness="MOSTLY"),
        )
        assert response.status_code == 422

    def test_compliance_score_out_of_range_returns_422(self, client, make_system):
        """Test that the compliance score is bounded to 0-100."""
        response = client.post(
            "/api/uk-ai-regulation/assessments",
            json=self._payload(make_system(), overall_compliance_score=120),
        )
        assert response.status_code == 422

    def test_latest_without_assessments_returns_404(self, client, make_system):
        """Test that a never-assessed system returns 404."""
        response = client.get(f"/api/uk-ai-regulation/assessments/latest/{make_system()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "No assessment found for this system"


class TestAISystemRoutes:
    """Test /api/ai-systems."""

    def test_create_and_get(self, client):
        """Test registering an AI system."""
        response = client.post(
            "/api/ai-systems",
            json={"system_name": "Churn Predictor", "business_owner": "Marketing"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["risk_classification"] == "NOT_YET_ASSESSED"
        assert data["data_sources"] == []

        fetched = client.get(f"/api/ai-systems/{data['system_id']}").json()
        assert fetched["system_name"] == "Churn Predictor"

    def test_duplicate_name_returns_400(self, client, make_system):
        """Test that system names are unique."""
        make_system("Churn Predictor")

        response = client.post("/api/ai-systems", json={"system_name": "Churn Predictor"})

        assert response.status_code == 400
        assert response.json()["detail"] == "A system with this name already exists"

    def test_search_and_sort(self, client, make_system):
        """Test search across name and owners and sorting by name."""
        make_system("Beta Scorer", business_owner="Retail Lending")
        make_system("Alpha Scorer", business_owner="Retail Lending")
        make_system("Chatbot", business_owner="Support")

        response = client.get(
            "/api/ai-systems",
            params={"search": "lending", "sort_by": "system_name", "sort_order": "asc"},
        )

        assert [s["system_name"] for s in response.json()] == ["Alpha Scorer", "Beta Scorer"]

    def test_invalid_sort_returns_400(self, client):
        """Test that unsupported sort columns are rejected."""
        response = client.get("/api/ai-systems", params={"sort_by": "owner_password"})
        assert response.status_code == 400

    def test_update_and_delete(self, client, make_system):
        """Test updating then deleting an AI system."""
        system_id = make_system()

        response = client.put(
            f"/api/ai-systems/{system_id}", json={"deployment_status": "PRODUCTION"}
        )
        assert response.status_code == 200
        assert response.json()["deployment_status"] == "PRODUCTION"

        response = client.delete(f"/api/ai-systems/{system_id}")
        assert response.json()["success"] is True
        assert client.get(f"/api/ai-systems/{system_id}").status_code == 404

    def test_delete_unknown_returns_404(self, client):
        """Test that deleting an unknown system returns 404."""
        response = client.delete(f"/api/ai-systems/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "AI system not found"

    def test_export_csv(self, client, make_system):
        """Test the CSV download: headers, attachment name and one row per system."""
        make_system(
            "Credit Scorer",
            data_sources=["Bureau data", "Application form"],
            deployment_date=date(2024, 11, 5),
        )

        response = client.get("/api/ai-systems/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        filename = f"ai-systems-export-{date.today().isoformat()}.csv"
        assert response.headers["content-disposition"] == f'attachment; filename="{filename}"'

        header, row = list(csv.reader(io.StringIO(response.text)))
        assert header[:3] == ["System ID", "System Name", "System Purpose"]
        assert header[-1] == "Modified By"
        record = dict(zip(header, row))
        assert record["System Name"] == "Credit Scorer"
        assert record["Data Sources"] == "Bureau data; Application form"
        assert record["Deployment Date"] == "2024-11-05"
        assert record["Risk Classification"] == "NOT_YET_ASSESSED"
        assert record["Vendor/Provider"] == ""

    def test_export_applies_listing_filters(self, client, make_system):
        """Test that the export honours search and sorting like the listing."""
        make_system("Beta Scorer", business_owner="Retail Lending")
        make_system("Alpha Scorer", business_owner="Retail Lending")
        make_system("Chatbot", business_owner="Support")

        response = client.get(
            "/api/ai-systems/export",
            params={"search": "lending", "sort_by": "system_name", "sort_order": "asc"},
        )

        rows = list(csv.reader(io.StringIO(response.text)))[1:]
        assert [r[1] for r in rows] == ["Alpha Scorer", "Beta Scorer"]

    def test_export_invalid_sort_returns_400(self, client):
        """Test that the export rejects unsupported sort columns."""
        response = client.get("/api/ai-systems/export", params={"sort_by": "owner_password"})
        assert response.status_code == 400


class TestKnowledgeBaseRoutes:
    """Test /api/knowledge-base feedback."""

    def test_helpful_feedback_increments_counter(self, client, add_article):
        """Test that votes are counted per kind."""
        article_id = add_article()

        client.post(f"/api/knowledge-base/{article_id}/feedback", json={"feedback": "helpful"})
        response = client.post(
            f"/api/knowledge-base/{article_id}/feedback", json={"feedback": "helpful"}
        )
        client.post(f"/api/knowledge-base/{article_id}/feedback", json={"feedback": "not_helpful"})

        assert response.status_code == 200
        assert response.json()["helpful_count"] == 2

        with_both = client.post(
            f"/api/knowledge-base/{article_id}/feedback", json={"feedback": "not_helpful"}
        ).json()
        assert with_both == {"id": str(article_id), "helpful_count": 2, "not_helpful_count": 2}

    def test_invalid_feedback_returns_400(self, client, add_article):
        """Test that unknown feedback values are rejected."""
        response = client.post(
            f"/api/knowledge-base/{add_article()}/feedback", json={"feedback": "meh"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid feedback value"

    def test_unpublished_article_returns_400(self, client, add_article):
        """Test that drafts do not accept feedback."""
        response = client.post(
            f"/api/knowledge-base/{add_article(status='DRAFT')}/feedback",
            json={"feedback": "helpful"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot provide feedback on unpublished article"

    def test_unknown_article_returns_404(self, client):
        """Test that an unknown article returns 404."""
        response = client.post(
            f"/api/knowledge-base/{uuid4()}/feedback", json={"feedback": "helpful"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Article not found"
