#!/usr/bin/env python3
# backend/scripts/seed_sample_data.py
"""
Seed a development database with roles, users, accounts and a few months
of balance history. Safe to run repeatedly: existing rows are left alone.

    python backend/scripts/seed_sample_data.py
"""
import logging
import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from balance_tracker.database import SessionLocal
from balance_tracker.models import Account, BalanceRecord, Role, RoleName, User
from balance_tracker.services.accounts import AccountService
from balance_tracker.services.auth.password import PasswordService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROLES = {
    RoleName.ADMIN: "Full access: uploads, period views, account management",
    RoleName.USER: "Read access to latest balances and summaries",
}

USERS = [
    {"username": "admin", "email": "admin@adra.com", "password": "Admin@123", "role": RoleName.ADMIN},
    {"username": "john.doe", "email": "john.doe@adra.com", "password": "User@123", "role": RoleName.USER},
]

# Account name -> (low, high) range of the base monthly amount
ACCOUNTS = {
    "R&D": (50000, 150000),
    "Canteen": (5000, 25000),
    "CEO's car expenses": (8000, 20000),
    "Marketing": (-5000, 60000),
    "Parking fines": (500, 3000),
}

HISTORY_MONTHS = 5


def _months_back(today: date, offset: int) -> tuple[int, int]:
    index = today.year * 12 + (today.month - 1) - offset
    return index // 12, index % 12 + 1


def seed():
    db = SessionLocal()
    account_service = AccountService()
    try:
        logger.info("Starting database seeding...")

        # 1. Roles
        roles: dict[str, Role] = {}
        for name, description in ROLES.items():
            role = db.execute(select(Role).where(Role.name == name)).scalar_one_or_none()
            if role is None:
                role = Role(name=name, description=description)
                db.add(role)
                logger.info(f"Created role: {name}")
            roles[name] = role
        db.commit()

        # 2. Users
        for data in USERS:
            user = db.execute(select(User).where(User.username == data["username"])).scalar_one_or_none()
            if user is not None:
                logger.info(f"User exists: {user.username}")
                continue
            user = User(
                username=data["username"],
                email=data["email"],
                hashed_password=PasswordService.hash_password(data["password"]),
                is_active=True,
                roles=[roles[data["role"]]],
            )
            db.add(user)
            db.commit()
            logger.info(f"Created user: {user.username} with role {data['role']}")

        # 3. Accounts
        for name in ACCOUNTS:
            if account_service.get_by_name(db, name) is None:
                account_service.create_account(db, name)

        # 4. Balance history
        if db.execute(select(BalanceRecord.id).limit(1)).first() is not None:
            logger.info("Balance history exists, skipping")
            return

        admin = db.execute(select(User).where(User.username == "admin")).scalar_one()
        accounts = account_service.list_accounts(db)
        today = date.today()
        now = datetime.now(timezone.utc)

        for offset in range(1, HISTORY_MONTHS + 1):
            year, month = _months_back(today, offset)
            for account in accounts:
                low, high = ACCOUNTS.get(account.name, (1000, 10000))
                base = random.randint(low, high)
                variation = Decimal(random.randint(-15, 15)) / 100
                db.add(BalanceRecord(
                    account_id=account.id,
                    year=year,
                    month=month,
                    amount=(Decimal(base) * (1 + variation)).quantize(Decimal("0.01")),
                    uploaded_by=admin.id,
                    uploaded_at=now - timedelta(days=30 * offset + random.randint(1, 27)),
                ))

        db.commit()
        logger.info(f"Created balance history for {len(accounts)} accounts x {HISTORY_MONTHS} months")
        logger.info("Seeding complete!")

    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
