#!/usr/bin/env python3
"""
Provision a gym with its lifecycle settings and first admin account
Usage: python seed_gym.py --name "Iron Temple" --admin-uid <firebase_uid> --admin-email owner@irontemple.it
"""

import argparse
import logging
import sys
from typing import Optional

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.models import Gym, GymSettings, User

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def provision_gym(
    db: Session,
    name: str,
    admin_uid: str,
    admin_email: Optional[str] = None,
    admin_name: Optional[str] = None,
    days_to_first_followup: Optional[int] = None,
    package_confirmation_days: Optional[int] = None,
    custom_plan_confirmation_days: Optional[int] = None,
) -> Gym:
    """Create gym, settings row and admin user; an existing admin UID is reused"""
    existing = db.query(User).filter(User.firebase_uid == admin_uid).first()
    if existing and existing.gym_id:
        logger.info(f"ℹ️ Admin {admin_uid} already belongs to gym {existing.gym_id}, nothing to do")
        return db.query(Gym).filter(Gym.id == existing.gym_id).first()

    gym = Gym(name=name, email=admin_email)
    db.add(gym)
    db.flush()

    db.add(
        GymSettings(
            gym_id=gym.id,
            days_to_first_followup=days_to_first_followup,
            package_confirmation_days=package_confirmation_days,
            custom_plan_confirmation_days=custom_plan_confirmation_days,
        )
    )

    if existing:
        existing.gym_id = gym.id
        existing.role = "admin"
    else:
        db.add(
            User(
                firebase_uid=admin_uid,
                email=admin_email,
                full_name=admin_name,
                role="admin",
                gym_id=gym.id,
            )
        )

    db.commit()
    db.refresh(gym)
    logger.info(f"✅ Gym '{gym.name}' provisioned with id {gym.id}")
    return gym


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Provision a gym and its admin account")
    parser.add_argument("--name", required=True)
    parser.add_argument("--admin-uid", required=True, help="Firebase UID of the gym admin")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-name")
    parser.add_argument("--days-to-first-followup", type=int)
    parser.add_argument("--package-confirmation-days", type=int)
    parser.add_argument("--custom-plan-confirmation-days", type=int)
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        provision_gym(
            db,
            name=args.name,
            admin_uid=args.admin_uid,
            admin_email=args.admin_email,
            admin_name=args.admin_name,
            days_to_first_followup=args.days_to_first_followup,
            package_confirmation_days=args.package_confirmation_days,
            custom_plan_confirmation_days=args.custom_plan_confirmation_days,
        )
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Provisioning failed: {e}")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
