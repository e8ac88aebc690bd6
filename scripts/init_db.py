#!/usr/bin/env python3
"""
Database initialization script for the AI governance API.

Usage:
    python scripts/init_db.py [--drop] [--no-seed]

This script will:
1. Create all database tables
2. Seed a demo AI system with a bias test, remediation actions,
   a model card and a published knowledge base article
"""

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from governance_api.models import (
    AISystem,
    BiasTest,
    KnowledgeBaseArticle,
    ModelCard,
    RemediationAction,
    get_session_maker,
    init_db,
)

load_dotenv()

DEMO_SYSTEM_NAME = "Demo Credit Scoring Model"


def seed_demo_data(session: Session) -> AISystem:
    """Create a demo AI system and its governance records."""
    existing = session.query(AISystem).filter_by(system_name=DEMO_SYSTEM_NAME).first()

    if existing:
        print(f"   Demo system already exists: {existing.system_name}")
        return existing

    system = AISystem(
        system_name=DEMO_SYSTEM_NAME,
        system_purpose="Scores consumer credit applications",
        business_owner="Retail Lending",
        technical_owner="ML Platform Team",
        ai_model_type="Gradient boosted trees",
        deployment_status="PRODUCTION",
        data_sources=["Credit bureau", "Application form"],
    )

    test = BiasTest(
        ai_system=system,
        test_name="Gender parity in approvals",
        test_type="Demographic parity",
        protected_attributes_tested=["gender"],
        tested_by="Fairness Review Board",
        overall_fairness_score=0.72,
        issues_detected=True,
        severity_level="HIGH",
        status="REMEDIATION_NEEDED",
    )
    test.remediation_actions.extend([
        RemediationAction(
            issue_description="Approval rate gap above threshold",
            recommended_action="Reweight training data",
            assigned_to="ML Platform Team",
            priority="HIGH",
            status="IN_PROGRESS",
            due_date=date.today() + timedelta(days=30),
        ),
        RemediationAction(
            issue_description="Proxy variable for gender in feature set",
            recommended_action="Remove postcode-derived features",
            assigned_to="Data Engineering",
            priority="MEDIUM",
            status="NOT_STARTED",
            due_date=date.today() + timedelta(days=45),
        ),
    ])

    card = ModelCard(
        ai_system=system,
        card_version="1.0",
        status="DRAFT",
        model_overview="Gradient boosted credit risk model",
        intended_use="Pre-screening of consumer credit applications",
        updated_by="ML Platform Team",
    )

    article = KnowledgeBaseArticle(
        title="Running a demographic parity test",
        content="Step-by-step guide to demographic parity testing.",
        status="PUBLISHED",
    )

    session.add_all([system, test, card, article])
    session.commit()
    session.refresh(system)

    print(f"   Created demo system: {system.system_name} ({system.system_id})")
    print(f"   Created bias test with {len(test.remediation_actions)} remediation actions")
    return system


def main():
    """Main initialization function."""
    parser = argparse.ArgumentParser(description="Initialize AI governance database")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop all tables before creating (WARNING: destructive!)",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Create tables without demo data",
    )
    args = parser.parse_args()

    print("=" * 80)
    print("AI Governance API Database Initialization")
    print("=" * 80)

    if args.drop:
        print("\nWARNING: Dropping all existing tables!")
        response = input("   Are you sure? (yes/no): ")
        if response.lower() != "yes":
            print("   Aborted.")
            return
        print()

    print("1. Creating database tables...")
    try:
        engine = init_db(drop_all=args.drop)
        print("   Tables created successfully")
        print(f"   Database: {engine.url}")
    except Exception as e:
        print(f"   Failed to create tables: {e}")
        sys.exit(1)

    if not args.no_seed:
        print("\n2. Seeding demo data...")
        try:
            SessionMaker = get_session_maker(engine=engine)
            with SessionMaker() as session:
                seed_demo_data(session)
        except Exception as e:
            print(f"   Failed to seed demo data: {e}")
            sys.exit(1)

    print("\n" + "=" * 80)
    print("Database initialization complete!")
    print("=" * 80)

    print("\nNext Steps:")
    print("   1. Start the API server: uvicorn governance_api.main:app --reload")
    print("   2. View API docs: http://localhost:8000/docs")
    print("   3. Run tests: pytest --cov=governance_api")

    print()


if __name__ == "__main__":
    main()
