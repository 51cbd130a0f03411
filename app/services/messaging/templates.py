"""Customer-facing WhatsApp message texts."""
from typing import List, Optional

from app.db.models import PaymentMethod
from app.services.conversation.state import ConversationState
from app.services.ordering.models import ResolvedItem
from app.services.persistence.orders import CommitResult


def format_rupiah(value: float) -> str:
    """13000 -> "Rp 13.000"."""
    return "Rp " + f"{int(round(value)):,}".replace(",", ".")


def format_qty(qty: float) -> str:
    """2.0 -> "2", 1.5 -> "1,5"."""
    if float(qty).is_integer():
        return str(int(qty))
    return f"{qty:g}".replace(".", ",")


def _item_lines(items: List[ResolvedItem]) -> List[str]:
    return [
        f"- {item.product_name} x{format_qty(item.qty)} = {format_rupiah(item.line_total)}"
        for item in items
    ]


def menu_greeting(business_name: str) -> str:
    return "\n".join(
        [
            f"Halo kak 👋, selamat datang di *{business_name} Bot* 🌿",
            "",
            "Silakan pilih salah satu:",
        ]
    )


def catalog_instructions() -> str:
    return "\n".join(
        [
            "Oke kak, untuk *order lewat katalog* 📖",
            "",
            "Saat ini katalog masih versi awal.",
            "Ketik saja dulu daftar sayur yang mau dibeli, contoh:",
            "",
            "- Bayam x2",
            "- Brokoli x1",
            "",
            "Ke depan akan ada link katalog interaktif ya 🌿",
        ]
    )


def manual_order_instructions() -> str:
    return "\n".join(
        [
            "Oke kak, *order ketik manual* ✍️",
            "",
            "Kirim dengan format:",
            "NAMA:",
            "ALAMAT LENGKAP:",
            "ORDER:",
            "- Bayam x2",
            "- Wortel 500gr",
            "",
            "Contoh:",
            "NAMA: Budi",
            "ALAMAT: Graha Famili, Jl. XYZ No. 10",
            "ORDER:",
            "- Bayam x2",
            "- Brokoli x1",
        ]
    )


def chat_cs_message(cs_whatsapp_number: str) -> str:
    return (
        "Kalau mau chat langsung dengan CS manusia 👩‍🍳, klik: "
        f"https://wa.me/{cs_whatsapp_number}"
    )


def draft_summary(state: ConversationState) -> str:
    """Summary of a resolved draft, asking the customer to confirm."""
    draft = state.parsed
    return "\n".join(
        [
            "Terima kasih kak, berikut ringkasan order kakak 👇",
            "",
            f"Nama: {draft.name or '(belum diisi)'}",
            f"Alamat: {draft.address or '(belum diisi)'}",
            "",
            "Order:",
            *_item_lines(state.resolved_items),
            "",
            f"Subtotal: {format_rupiah(state.subtotal)}",
            "Ongkir dihitung sesuai zona setelah konfirmasi.",
            "",
            "Kalau sudah benar, balas *OK COD* atau *OK TF* ya kak 🙏",
            "Kalau mau revisi, silakan kirim ulang format NAMA / ALAMAT / ORDER.",
        ]
    )


def draft_errors(errors: List[str]) -> str:
    """Itemised list of problems with a manual order."""
    numbered = [f"{index}. {error}" for index, error in enumerate(errors, start=1)]
    return "\n".join(
        [
            "Maaf kak, order belum bisa kami proses 🙏",
            "",
            *numbered,
            "",
            "Silakan perbaiki lalu kirim ulang dengan format NAMA / ALAMAT / ORDER ya kak.",
        ]
    )


def order_confirmation(result: CommitResult, transfer_instructions: Optional[str] = None) -> str:
    """
    Message sent after an order is committed.

    An undetected zone says so instead of showing a fee; a zone without a
    configured fee shows no amount at all, which keeps it apart from a
    free (Rp 0) zone.
    """
    zone = result.zone
    lines = [
        f"Order kakak sudah kami terima ✅ (No. order: #{result.order_id})",
        "",
        *_item_lines(result.items),
        "",
        f"Subtotal: {format_rupiah(result.subtotal)}",
    ]

    if zone.detected:
        lines.append(f"Zona: {zone.zone_name or zone.zone_code}")
        if zone.delivery_fee_db is not None:
            lines.append(f"Ongkir: {format_rupiah(zone.delivery_fee_db)}")
        else:
            lines.append("Ongkir: akan dikonfirmasi admin")
    else:
        lines.append("Zona: belum terdeteksi, admin akan cek ya kak")

    lines.append(f"Total: {format_rupiah(result.grand_total)}")
    lines.append("")

    if result.payment_method == PaymentMethod.TRANSFER:
        lines.append("Pembayaran: Transfer")
        if transfer_instructions:
            lines.append(transfer_instructions)
    else:
        lines.append("Pembayaran: COD (bayar di tempat)")

    lines.append("")
    lines.append("Terima kasih kak, pesanan akan segera kami siapkan 🌿")
    return "\n".join(lines)


def commit_failed_message() -> str:
    return (
        "Maaf kak, pesanan belum berhasil tersimpan karena gangguan sistem 🙏 "
        "Admin kami akan segera follow up order kakak secara manual."
    )
