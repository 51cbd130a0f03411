"""Unit tests for customer-facing message texts."""
from app.db.models import PaymentMethod
from app.services.messaging import templates
from app.services.ordering.models import ResolvedItem
from app.services.persistence.orders import CommitResult
from app.services.zones.models import ZoneMatch


def make_result(zone: ZoneMatch, payment_method: PaymentMethod = PaymentMethod.COD) -> CommitResult:
    items = [
        ResolvedItem(
            raw="Bayam 2 ikat",
            alias_text="bayam",
            product_id=1,
            product_name="Bayam",
            unit_price=5000,
            qty=2,
            line_total=10000,
        ),
        ResolvedItem(
            raw="Wortel 1",
            alias_text="wortel",
            product_id=2,
            product_name="Wortel",
            unit_price=3000,
            qty=1,
            line_total=3000,
        ),
    ]
    return CommitResult(
        order_id=42,
        customer_id=7,
        items=items,
        subtotal=13000,
        delivery_fee=zone.delivery_fee,
        discount=0,
        grand_total=13000 + zone.delivery_fee,
        payment_method=payment_method,
        zone=zone,
    )


class TestFormatting:
    """Test number formatting."""

    def test_format_rupiah(self):
        """Test thousands separators."""
        assert templates.format_rupiah(13000) == "Rp 13.000"
        assert templates.format_rupiah(0) == "Rp 0"
        assert templates.format_rupiah(1250000.0) == "Rp 1.250.000"

    def test_format_qty(self):
        """Test whole and fractional quantities."""
        assert templates.format_qty(2.0) == "2"
        assert templates.format_qty(1.5) == "1,5"


class TestOrderConfirmation:
    """Test the message sent after an order is committed."""

    def test_zone_with_fee(self):
        """Test a zone with a configured fee."""
        zone = ZoneMatch(zone_id=1, zone_code="GRAHA_FAMILI", zone_name="Graha Famili", delivery_fee_db=10000)

        text = templates.order_confirmation(make_result(zone))

        assert "#42" in text
        assert "- Bayam x2 = Rp 10.000" in text
        assert "Subtotal: Rp 13.000" in text
        assert "Zona: Graha Famili" in text
        assert "Ongkir: Rp 10.000" in text
        assert "Total: Rp 23.000" in text
        assert "COD" in text

    def test_free_zone_shows_zero_fee(self):
        """Test that a free zone shows Rp 0."""
        zone = ZoneMatch(zone_id=3, zone_code="DARMO_AREA", zone_name="Darmo Area", delivery_fee_db=0)

        text = templates.order_confirmation(make_result(zone))

        assert "Ongkir: Rp 0" in text
        assert "Total: Rp 13.000" in text

    def test_zone_without_fee_shows_no_amount(self):
        """Test that an unconfigured fee is not shown as an amount."""
        zone = ZoneMatch(zone_id=4, zone_code="MULYOSARI_AREA", zone_name="Mulyosari Area")

        text = templates.order_confirmation(make_result(zone))

        assert "Ongkir: Rp" not in text
        assert "Ongkir: akan dikonfirmasi admin" in text
        assert "Total: Rp 13.000" in text

    def test_undetected_zone(self):
        """Test the message when no zone was detected."""
        text = templates.order_confirmation(make_result(ZoneMatch()))

        assert "belum terdeteksi" in text
        assert "Ongkir" not in text

    def test_transfer_instructions(self):
        """Test that transfer orders include the configured instructions."""
        zone = ZoneMatch(zone_code="GUBENG_AREA")

        text = templates.order_confirmation(
            make_result(zone, PaymentMethod.TRANSFER), "BCA 123 a.n. Pak Sayur"
        )

        assert "Pembayaran: Transfer" in text
        assert "BCA 123 a.n. Pak Sayur" in text
        assert "Zona: GUBENG_AREA" in text


class TestDraftMessages:
    """Test draft summary and error texts."""

    def test_draft_errors_numbered(self):
        """Test that errors are listed with numbers."""
        text = templates.draft_errors(["NAMA belum diisi", "ORDER belum ada item"])

        assert "1. NAMA belum diisi" in text
        assert "2. ORDER belum ada item" in text
