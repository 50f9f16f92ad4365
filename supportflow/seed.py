"""Demo users and sample support data for local runs."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from functools import lru_cache

from .conversations.schemas import (
    Conversation,
    ConversationState,
    Message,
    MessageDirection,
    SenderType,
    Sentiment,
    SlaTimers,
)
from .core import utcnow
from .customers.schemas import Customer, CustomerTier
from .resolutions.schemas import Resolution, ResolutionStatus, TimelineEntry
from .schemas import Severity
from .security.passwords import hash_password
from .security.users import User, UserRole
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoAccount:
    id: str
    email: str
    password: str
    role: UserRole
    name: str


DEMO_ACCOUNTS: tuple[DemoAccount, ...] = (
    DemoAccount("user_admin1", "admin@company.com", "admin123", UserRole.ADMIN, "Admin User"),
    DemoAccount("user_agent1", "agent@company.com", "agent123", UserRole.AGENT, "Sarah Support"),
    DemoAccount(
        "user_eng1", "engineer@company.com", "engineer123", UserRole.ENGINEER, "Mike Engineer"
    ),
)


@lru_cache(maxsize=1)
def _demo_users() -> tuple[User, ...]:
    # Hashed once per process; every app built in this process shares them.
    return tuple(
        User(
            id=account.id,
            email=account.email,
            name=account.name,
            role=account.role,
            password_hash=hash_password(account.password),
        )
        for account in DEMO_ACCOUNTS
    )


def seed_users(store: EntityStore) -> None:
    for user in _demo_users():
        store.users.save(user)


def _ago(now: dt.datetime, **delta: float) -> dt.datetime:
    return now - dt.timedelta(**delta)


def _add_messages(
    store: EntityStore, conversation: Conversation, messages: list[Message]
) -> None:
    for message in messages:
        store.messages.append(message)
    conversation.message_count = store.messages.count_for(conversation.id)
    if messages:
        conversation.last_message_at = messages[-1].created_at


def seed_sample_data(store: EntityStore) -> None:
    """Install three customers, three conversations and one resolution."""

    now = utcnow()
    customers = [
        Customer(
            id="cust_1",
            name="John Doe",
            email="john@example.com",
            company="Acme Corp",
            tier=CustomerTier.STANDARD,
            created_at=_ago(now, days=730),
        ),
        Customer(
            id="cust_2",
            name="Jane Smith",
            email="jane@example.com",
            company="Tech Startup Inc",
            tier=CustomerTier.STANDARD,
            created_at=_ago(now, days=180),
        ),
        Customer(
            id="cust_3",
            name="Bob Wilson",
            email="bob@enterprise.com",
            company="Enterprise Global Ltd",
            tier=CustomerTier.ENTERPRISE,
            created_at=_ago(now, days=1825),
        ),
    ]
    for customer in customers:
        store.customers.save(customer)

    login_issue = Conversation(
        id="conv_sample_1",
        customer_id="cust_1",
        customer_name="John Doe",
        customer_email="john@example.com",
        state=ConversationState.AWAITING_AGENT,
        severity=Severity.P1,
        sentiment=Sentiment.NEGATIVE,
        intent="account_access_issue",
        current_channel="web_chat",
        channels_used=["web_chat"],
        assigned_team_id="team_support",
        subject="Cannot login to my account",
        tags=["login", "authentication"],
        sla=SlaTimers(
            first_response_due_at=now + dt.timedelta(minutes=30),
            resolution_due_at=now + dt.timedelta(hours=4),
        ),
        created_at=_ago(now, minutes=10),
        updated_at=now,
    )
    _add_messages(
        store,
        login_issue,
        [
            Message(
                id="msg_1_1",
                conversation_id=login_issue.id,
                channel="web_chat",
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                sender_name="John Doe",
                content=(
                    "I can't login to my account! I've tried resetting my password "
                    "3 times but it's not working. This is really frustrating!"
                ),
                status="delivered",
                created_at=_ago(now, minutes=10),
            ),
            Message(
                id="msg_1_2",
                conversation_id=login_issue.id,
                channel="web_chat",
                direction=MessageDirection.INTERNAL,
                sender_type=SenderType.SYSTEM,
                content=(
                    "AI Classification: Account Access Issue (P1) - Customer is "
                    "experiencing login problems. Sentiment: Negative."
                ),
                status="delivered",
                created_at=_ago(now, minutes=9),
            ),
        ],
    )

    export_question = Conversation(
        id="conv_sample_2",
        customer_id="cust_2",
        customer_name="Jane Smith",
        customer_email="jane@example.com",
        state=ConversationState.OPEN,
        severity=Severity.P2,
        sentiment=Sentiment.NEUTRAL,
        intent="how_to_guidance",
        current_channel="email",
        channels_used=["email"],
        assigned_team_id="team_support",
        subject="How to export my data?",
        tags=["export", "data"],
        sla=SlaTimers(
            first_response_due_at=now + dt.timedelta(hours=1),
            resolution_due_at=now + dt.timedelta(hours=8),
        ),
        created_at=_ago(now, minutes=5),
        updated_at=now,
    )
    _add_messages(
        store,
        export_question,
        [
            Message(
                id="msg_2_1",
                conversation_id=export_question.id,
                channel="email",
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                sender_name="Jane Smith",
                content="Hi, how can I export all of my data to CSV?",
                status="delivered",
                created_at=_ago(now, minutes=5),
            ),
        ],
    )

    payment_failure = Conversation(
        id="conv_sample_3",
        customer_id="cust_3",
        customer_name="Bob Wilson",
        customer_email="bob@enterprise.com",
        state=ConversationState.ESCALATED,
        severity=Severity.P0,
        sentiment=Sentiment.ANGRY,
        intent="transaction_system_failure",
        current_channel="whatsapp",
        channels_used=["whatsapp", "email"],
        assigned_agent_id="user_agent1",
        assigned_team_id="team_support",
        resolution_id="res_sample_1",
        subject="Payment failed - $10,000 transaction stuck!",
        tags=["payment", "urgent", "enterprise"],
        sla=SlaTimers(
            first_response_due_at=_ago(now, minutes=5),
            resolution_due_at=now + dt.timedelta(hours=1),
            breached=True,
        ),
        created_at=_ago(now, minutes=45),
        updated_at=now,
    )
    _add_messages(
        store,
        payment_failure,
        [
            Message(
                id="msg_3_1",
                conversation_id=payment_failure.id,
                channel="whatsapp",
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                sender_name="Bob Wilson",
                content=(
                    "URGENT! I tried to transfer $10,000 to our supplier but the "
                    "transaction has been stuck for 2 hours! We need this resolved NOW!"
                ),
                status="delivered",
                created_at=_ago(now, minutes=45),
            ),
            Message(
                id="msg_3_2",
                conversation_id=payment_failure.id,
                channel="whatsapp",
                direction=MessageDirection.OUTBOUND,
                sender_type=SenderType.AGENT,
                sender_id="user_agent1",
                sender_name="Support Agent",
                content=(
                    "I understand the urgency, Bob. I'm escalating this to our "
                    "technical team immediately. Can you share the transaction ID?"
                ),
                status="delivered",
                created_at=_ago(now, minutes=40),
            ),
            Message(
                id="msg_3_3",
                conversation_id=payment_failure.id,
                channel="whatsapp",
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                sender_name="Bob Wilson",
                content="TXN-2024011500123. Please hurry, our supplier is waiting!",
                status="delivered",
                created_at=_ago(now, minutes=38),
            ),
        ],
    )

    for conversation in (login_issue, export_question, payment_failure):
        store.conversations.save(conversation)

    store.resolutions.save(
        Resolution(
            id="res_sample_1",
            conversation_id=payment_failure.id,
            customer_id="cust_3",
            title="Payment Processing Failure - $10,000 Transaction",
            description=(
                "Enterprise customer Bob Wilson experienced a stuck transaction "
                "during supplier payment."
            ),
            issue_type="transaction_system_failure",
            priority=Severity.P0,
            status=ResolutionStatus.FIX_IN_PROGRESS,
            assigned_team_id="team_engineering",
            assigned_engineer_id="user_eng1",
            root_cause="Database connection pool exhaustion during peak load",
            affected_systems=["payment-gateway", "transaction-processor", "database"],
            timeline=[
                TimelineEntry(timestamp=_ago(now, minutes=45), event="Issue reported via WhatsApp"),
                TimelineEntry(timestamp=_ago(now, minutes=40), event="Escalated to engineering"),
                TimelineEntry(timestamp=_ago(now, minutes=35), event="Swarm channel created"),
                TimelineEntry(timestamp=_ago(now, minutes=30), event="Root cause identified"),
                TimelineEntry(timestamp=_ago(now, minutes=20), event="Fix deployed to staging"),
            ],
            created_at=_ago(now, minutes=45),
            updated_at=now,
        )
    )
    logger.info("Sample data installed: 3 customers, 3 conversations, 1 resolution")


__all__ = ["DEMO_ACCOUNTS", "DemoAccount", "seed_sample_data", "seed_users"]
