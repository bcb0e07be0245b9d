"""
Script to activate a plan for an owner account without going through /subscriptions/pay.
Run: python -m scripts.activate_plan owner@example.com business
"""
import sys
import os
import argparse

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.db.models.user import User
from app.core.errors import AppError
from app.core.roles import Role
from app.services.subscription_service import activate_for_plan
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def activate_owner_plan(email: str, plan: str) -> bool:
    """Replace the owner's current subscription with an active one for plan."""
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user:
            logger.error(f"User {email} not found")
            return False
        if user.role != Role.OWNER.value:
            logger.error(f"User {email} is a {user.role}, only owners hold subscriptions")
            return False

        subscription = activate_for_plan(db, user, plan)
        logger.info(
            f"Activated {subscription.plan} for {email} "
            f"(subscription_id={subscription.id}, expires_at={subscription.expires_at})"
        )
        return True
    except AppError as e:
        db.rollback()
        logger.error(f"Activation failed for {email}: {e.message}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("plan", choices=["starter", "business", "corporate"])
    args = parser.parse_args()

    if activate_owner_plan(args.email, args.plan):
        print(f"\n[SUCCESS] {args.email} now has an active {args.plan} subscription")
    else:
        print(f"\n[ERROR] Failed to activate {args.plan} for {args.email}")
        sys.exit(1)
