"""Unit tests for conversation state, message de-duplication and confirmation replies."""
import pytest

from app.db.models import PaymentMethod
from app.services.conversation.confirmation import ConfirmationInterpreter
from app.services.conversation.dedup import InMemoryMessageDeduplicator
from app.services.conversation.state import ConversationState, InMemoryConversationStore
from app.services.ordering.models import ManualOrderDraft, ResolvedItem
from app.services.text.normalizer import normalize_text


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_state(name: str = "Budi", qty: float = 2) -> ConversationState:
    draft = ManualOrderDraft(customer_phone="628111", raw_text="...", name=name, address="Graha Famili")
    item = ResolvedItem(
        raw=f"Bayam {qty}",
        alias_text="bayam",
        product_id=1,
        product_name="Bayam",
        unit_price=5000,
        qty=qty,
        line_total=qty * 5000,
    )
    return ConversationState(parsed=draft, resolved_items=[item])


class TestConversationStore:
    """Test the in-memory draft store."""

    @pytest.mark.asyncio
    async def test_put_and_get(self):
        """Test storing and reading a draft."""
        store = InMemoryConversationStore(ttl_seconds=60)
        state = make_state()

        await store.put("628111", state)

        assert await store.get("628111") is state
        assert await store.get("628999") is None
        assert state.subtotal == 10000

    @pytest.mark.asyncio
    async def test_last_write_wins(self):
        """Test that a new draft replaces the previous one."""
        store = InMemoryConversationStore(ttl_seconds=60)

        await store.put("628111", make_state(name="Budi"))
        await store.put("628111", make_state(name="Sari", qty=3))

        stored = await store.get("628111")
        assert stored.parsed.name == "Sari"
        assert stored.subtotal == 15000

    @pytest.mark.asyncio
    async def test_expiry(self):
        """Test that drafts older than the TTL are gone."""
        clock = FakeClock()
        store = InMemoryConversationStore(ttl_seconds=60, clock=clock)
        await store.put("628111", make_state())

        clock.advance(59)
        assert await store.get("628111") is not None

        clock.advance(2)
        assert await store.get("628111") is None

    @pytest.mark.asyncio
    async def test_expiry_counts_from_last_write(self):
        """Test that re-storing a draft restarts its lifetime."""
        clock = FakeClock()
        store = InMemoryConversationStore(ttl_seconds=60, clock=clock)
        state = make_state()
        await store.put("628111", state)

        clock.advance(50)
        await store.put("628111", state)
        clock.advance(50)

        assert await store.get("628111") is state
        assert set(ConversationState.model_fields) == {"parsed", "resolved_items"}

    @pytest.mark.asyncio
    async def test_expired_drafts_are_purged(self):
        """Test that drafts nobody reads again are dropped on the next write."""
        clock = FakeClock()
        store = InMemoryConversationStore(ttl_seconds=60, clock=clock)
        for i in range(1000):
            await store.put(f"628{i:06d}", make_state())

        clock.advance(61)
        await store.put("628999999", make_state())

        assert len(store._states) == 1
        assert await store.get("628000000") is None
        assert await store.get("628999999") is not None

    @pytest.mark.asyncio
    async def test_delete(self):
        """Test removing a draft, including one that does not exist."""
        store = InMemoryConversationStore(ttl_seconds=60)
        await store.put("628111", make_state())

        await store.delete("628111")
        await store.delete("628111")

        assert await store.get("628111") is None


class TestMessageDeduplicator:
    """Test processed message tracking."""

    def test_redelivery_detected(self):
        """Test that the second sighting of an id is a duplicate."""
        dedup = InMemoryMessageDeduplicator(ttl_seconds=60)

        assert dedup.seen_before("wamid.1") is False
        assert dedup.seen_before("wamid.1") is True
        assert dedup.seen_before("wamid.2") is False

    def test_missing_id_never_duplicate(self):
        """Test that messages without an id are always processed."""
        dedup = InMemoryMessageDeduplicator(ttl_seconds=60)

        assert dedup.seen_before(None) is False
        assert dedup.seen_before(None) is False
        assert dedup.seen_before("") is False

    def test_ids_expire(self):
        """Test that ids are forgotten after the TTL."""
        clock = FakeClock()
        dedup = InMemoryMessageDeduplicator(ttl_seconds=60, clock=clock)
        dedup.seen_before("wamid.1")

        clock.advance(61)

        assert dedup.seen_before("wamid.1") is False


class TestConfirmationInterpreter:
    """Test reading confirmation replies."""

    def interpret(self, reply: str, has_draft: bool = True):
        return ConfirmationInterpreter().interpret(normalize_text(reply).compact, has_draft=has_draft)

    def test_ok_defaults_to_cod(self):
        """Test that a bare ok confirms with cash on delivery."""
        assert self.interpret("ok") == PaymentMethod.COD
        assert self.interpret("Ok kak") == PaymentMethod.COD

    def test_cod(self):
        """Test explicit cash on delivery replies."""
        assert self.interpret("OK COD") == PaymentMethod.COD
        assert self.interpret("cod aja") == PaymentMethod.COD

    def test_transfer_variants(self):
        """Test transfer replies with typos."""
        assert self.interpret("transfer dong") == PaymentMethod.TRANSFER
        assert self.interpret("OK TF") == PaymentMethod.TRANSFER
        assert self.interpret("tff") == PaymentMethod.TRANSFER
        assert self.interpret("trasfer") == PaymentMethod.TRANSFER

    def test_transfer_wins_over_ok(self):
        """Test that transfer is checked before the plain ok."""
        assert self.interpret("ok transfer ya") == PaymentMethod.TRANSFER

    def test_no_draft_never_confirms(self):
        """Test that replies without a stored draft commit nothing."""
        assert self.interpret("ok cod", has_draft=False) is None
        assert self.interpret("transfer", has_draft=False) is None

    def test_unrelated_reply(self):
        """Test that other replies are not confirmations."""
        assert self.interpret("halo") is None
        assert self.interpret("berapa ongkirnya?") is None

    def test_ok_across_word_boundary(self):
        """Test that "ok" split over two words still confirms."""
        assert self.interpret("halo kak") == PaymentMethod.COD
        assert self.interpret("bokek") == PaymentMethod.COD
