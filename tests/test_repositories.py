"""Tests for the in-memory entity store."""

from datetime import datetime, timezone

from supportflow.conversations.schemas import (
    Conversation,
    Message,
    MessageDirection,
    SenderType,
    SlaTimers,
)
from supportflow.customers import CustomerService
from supportflow.customers.schemas import CustomerCreate
from supportflow.core import NotFoundError
from supportflow.store import EntityStore

NOW = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def _conversation(conversation_id: str = "conv_1") -> Conversation:
    return Conversation(
        id=conversation_id,
        customer_id="cust_1",
        sla=SlaTimers(first_response_due_at=NOW, resolution_due_at=NOW),
        created_at=NOW,
        updated_at=NOW,
    )


def test_conversation_repository_returns_copies():
    store = EntityStore()
    store.conversations.save(_conversation())

    fetched = store.conversations.get("conv_1")
    fetched.tags.append("mutated")
    fetched.message_count = 99

    again = store.conversations.get("conv_1")
    assert again.tags == []
    assert again.message_count == 0

    store.conversations.save(fetched)
    assert store.conversations.get("conv_1").message_count == 99
    assert store.conversations.get("missing") is None


def test_message_sequences_are_per_conversation():
    store = EntityStore()
    for index, conversation_id in enumerate(["conv_1", "conv_2", "conv_1"]):
        store.messages.append(
            Message(
                id=f"msg_{index}",
                conversation_id=conversation_id,
                channel="web_chat",
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                content=f"message {index}",
                created_at=NOW,
            )
        )

    assert [m.id for m in store.messages.list_for("conv_1")] == ["msg_0", "msg_2"]
    assert store.messages.count_for("conv_2") == 1
    assert store.messages.list_for("conv_3") == []

    store.messages.list_for("conv_1").clear()
    assert store.messages.count_for("conv_1") == 2


def test_stores_are_isolated():
    first, second = EntityStore(), EntityStore()
    first.conversations.save(_conversation())
    assert second.conversations.list() == []


def test_customer_service_round_trip():
    customers = CustomerService(EntityStore())
    created = customers.create_customer(
        CustomerCreate(name="Jane", email="jane@example.com", tier="enterprise")
    )

    assert created.id.startswith("cust_")
    assert customers.get_customer(created.id).tier.value == "enterprise"
    assert [c.id for c in customers.list_customers(tiers=["standard"])] == []
    assert customers.ensure_customer(created.id, name="Ignored").name == "Jane"

    try:
        customers.get_customer("cust_missing")
    except NotFoundError as exc:
        assert exc.message == "Customer cust_missing not found"
    else:  # pragma: no cover - assertion helper
        raise AssertionError("expected NotFoundError")
