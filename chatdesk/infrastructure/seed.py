"""Demo data used when a collection has never been stored or cannot be read."""
import time
from datetime import datetime, timezone
from typing import List

from chatdesk.domain.entities import (
    CUSTOMER_SENDER_ID,
    Chat,
    ChatStatus,
    Company,
    Message,
    MessageStatus,
    MetaConfig,
    ScheduledMessage,
    User,
    UserRole,
)

DEMO_COMPANY_ID = "c1"
DEMO_CHAT_ID = "chat1"


def seed_companies() -> List[Company]:
    return [
        Company(
            id=DEMO_COMPANY_ID,
            name="Demo Company",
            max_users=15,
            created_at=datetime.now(timezone.utc).isoformat(),
            meta_config=MetaConfig(),
        )
    ]


def seed_users() -> List[User]:
    return [
        User(
            id="u1",
            name="Super Admin",
            email="admin@chatdesk.local",
            password="123",
            role=UserRole.SUPER_ADMIN,
            phone="5511999990001",
            birth_date="1985-05-10",
            age=38,
            profession="Administrator",
        ),
        User(
            id="u2",
            name="Carlos Manager",
            email="carlos@company.local",
            password="123",
            role=UserRole.COMPANY_ADMIN,
            company_id=DEMO_COMPANY_ID,
            avatar_url="https://ui-avatars.com/api/?name=Carlos+Manager&background=random",
            phone="5511999990002",
            birth_date="1990-08-15",
            age=33,
            profession="Sales Manager",
        ),
    ]


def seed_chats() -> List[Chat]:
    five_minutes_ago = int(time.time() * 1000) - 5 * 60 * 1000
    return [
        Chat(
            id=DEMO_CHAT_ID,
            customer_name="Example Customer",
            customer_phone="+55 11 99999-9999",
            avatar_url="https://ui-avatars.com/api/?name=Example+Customer&background=random",
            messages=(
                Message(
                    id="m1",
                    text="Hi, I'd like to know more about your services.",
                    sender_id=CUSTOMER_SENDER_ID,
                    timestamp=five_minutes_ago,
                    status=MessageStatus.READ,
                    is_customer=True,
                ),
            ),
            unread_count=1,
            last_message_timestamp=five_minutes_ago,
            status=ChatStatus.ACTIVE,
            customer_email="customer@example.com",
            customer_company="Example Ltd",
            customer_value=0.0,
        )
    ]


def seed_scheduled_messages() -> List[ScheduledMessage]:
    return []
