from __future__ import annotations

import logging
import random
import re
import unicodedata
from datetime import date
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from shadmanager.constants import STATUS_PAID, format_date
from shadmanager.models import format_brl
from shadmanager.models.invoice import (
    Invoice,
    Student,
    current_period_dates,
    days_late,
    status_label,
    today_sp,
)
from shadmanager.models.pix_option import PixPaymentOption
from shadmanager.pix import generate_pix_qrcode_data_url
from shadmanager.settings import settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

DEFAULT_ACCENT_COLOR = "#f07f1d"
PIX_QRCODE_CID = "pix-qrcode-inline"

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)

_HEX_COLOR = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)
_HTTP_URL = re.compile(r"^https?://\S+$", re.IGNORECASE)
_DATA_URL = re.compile(
    r"^data:(image/(?:png|jpeg|jpg|webp|gif|svg\+xml));base64,([a-z0-9+/=\r\n]+)$",
    re.IGNORECASE,
)
_GREETING = re.compile(r"^ola\b")


class BillingEmailInput(BaseModel):
    customer_name: str | None = None
    amount_cents: int | None = None
    due_date: date | None = None
    subject: str | None = None
    custom_message: str | None = None
    pix_payload: str | None = None
    pix_qr_code_data_url: str | None = None
    pix_copy_url: str | None = None


class EmailBranding(BaseModel):
    organization_name: str = ""
    accent_color: str | None = None


class EmailAttachment(BaseModel):
    filename: str
    content_type: str
    content_base64: str
    cid: str | None = None


class BillingEmail(BaseModel):
    subject: str
    html: str
    text: str
    attachments: list[EmailAttachment] = []


def normalize_hex_color(value: str | None, fallback: str = DEFAULT_ACCENT_COLOR) -> str:
    normalized = (value or "").strip().lower()
    return normalized if _HEX_COLOR.match(normalized) else fallback


def parse_image_data_url(value: str | None) -> EmailAttachment | None:
    """Turn an inline QR code data URL into an e-mail attachment, or None if unusable."""
    match = _DATA_URL.match((value or "").strip())
    if not match:
        return None
    mime_type = match.group(1).lower()
    content = re.sub(r"\s+", "", match.group(2))
    if not content:
        return None
    if mime_type in ("image/jpeg", "image/jpg"):
        extension = "jpg"
    elif mime_type == "image/svg+xml":
        extension = "svg"
    else:
        extension = mime_type.split("/")[1]
    return EmailAttachment(
        filename=f"pix-qrcode.{extension}",
        content_type=mime_type,
        content_base64=content,
        cid=PIX_QRCODE_CID,
    )


def normalize_copy_url(value: str | None) -> str | None:
    normalized = (value or "").strip()
    return normalized if _HTTP_URL.match(normalized) else None


def due_status_label(due: date, today: date) -> str:
    days = days_late(due, today)
    if days:
        return f"Atrasada ha {days} dia{'' if days == 1 else 's'}"
    diff = (due - today).days
    if diff == 0:
        return "Vence hoje"
    return f"Vence em {diff} dia{'' if diff == 1 else 's'}"


def _badge_colors(status: str | None) -> tuple[str, str]:
    if status and status.startswith("Atrasada"):
        return "#fee2e2", "#991b1b"
    if status == "Vence hoje":
        return "#fef3c7", "#92400e"
    return "#dcfce7", "#166534"


def _strip_greetings(paragraphs: list[str]) -> list[str]:
    kept = []
    for paragraph in paragraphs:
        nfd = unicodedata.normalize("NFD", paragraph.strip().lower())
        plain = "".join(c for c in nfd if not unicodedata.combining(c))
        if not _GREETING.match(plain):
            kept.append(paragraph)
    return kept


def build_notice_number(today: date) -> str:
    return f"CBR-{today:%Y%m%d}-{random.randint(1000, 9999)}"


def build_billing_email(
    data: BillingEmailInput,
    branding: EmailBranding | None = None,
    *,
    today: date | None = None,
    notice_number: str | None = None,
) -> BillingEmail:
    """Build subject, HTML and plain-text bodies for a billing reminder.

    Branding defaults to the configured organization name and accent color.
    ``today`` and ``notice_number`` are generated when not given.
    """
    if branding is None:
        branding = default_branding()
    today = today or today_sp()
    customer_name = (data.customer_name or "").strip() or "cliente"
    organization_name = branding.organization_name.strip() or "ShadManager"
    accent_color = normalize_hex_color(branding.accent_color)
    today_label = format_date(today)
    notice_number = notice_number or build_notice_number(today)

    has_amount = data.amount_cents is not None and data.amount_cents > 0
    amount_label = format_brl(data.amount_cents) if has_amount else None
    due_label = format_date(data.due_date) if data.due_date else None
    due_status = due_status_label(data.due_date, today) if data.due_date else None
    pix_payload = (data.pix_payload or "").strip() or None
    qr_attachment = parse_image_data_url(data.pix_qr_code_data_url)
    copy_url = normalize_copy_url(data.pix_copy_url)

    subject = (data.subject or "").strip()
    if not subject:
        if due_label:
            subject = f"Lembrete de cobranca - vencimento {due_label}"
        else:
            subject = f"Lembrete de cobranca para {customer_name}"

    fallback = [
        f"Identificamos um valor em aberto de {amount_label} para {customer_name}."
        if has_amount
        else "Identificamos uma cobranca em aberto.",
        f"Vencimento: {due_label}." if due_label else "",
        "Se voce ja realizou o pagamento, desconsidere este e-mail.",
    ]
    message = (data.custom_message or "").strip() or "\n\n".join(p for p in fallback if p)
    paragraphs = _strip_greetings([p.strip() for p in re.split(r"\n{2,}", message) if p.strip()])

    amount_summary = amount_label or "Nao informado"
    due_summary = due_label or "Nao informado"
    status_summary = due_status or "Sem data de vencimento"
    badge_bg, badge_color = _badge_colors(due_status)

    html = _env.get_template("billing_email.html").render(
        organization_name=organization_name,
        notice_number=notice_number,
        accent_color=accent_color,
        customer_name=customer_name,
        amount_summary=amount_summary,
        due_summary=due_summary,
        status_summary=status_summary,
        badge_bg=badge_bg,
        badge_color=badge_color,
        paragraphs=paragraphs,
        pix_payload=pix_payload,
        qr_cid=qr_attachment.cid if qr_attachment else None,
        copy_url=copy_url if pix_payload else None,
        today_label=today_label,
    )

    text_lines = [
        f"{organization_name} - Aviso de cobranca",
        f"Emitido em: {today_label}",
        "",
        f"Cliente: {customer_name}",
        f"Valor em aberto: {amount_summary}",
        f"Vencimento: {due_summary}",
        f"Status: {status_summary}",
    ]
    plain_message = "\n\n".join(paragraphs).strip()
    if plain_message:
        text_lines += ["", plain_message]
    if pix_payload:
        text_lines += ["", "PIX copia e cola:", pix_payload]
        if copy_url:
            text_lines.append(f"Link para copiar: {copy_url}")

    logger.info(
        "Billing e-mail built: notice=%s amount=%s due=%s pix=%s qr=%s",
        notice_number,
        data.amount_cents,
        data.due_date,
        bool(pix_payload),
        bool(qr_attachment),
    )
    return BillingEmail(
        subject=subject,
        html=html,
        text="\n".join(text_lines),
        attachments=[qr_attachment] if qr_attachment else [],
    )


def default_branding() -> EmailBranding:
    return EmailBranding(
        organization_name=settings.organization_name,
        accent_color=settings.email_accent_color,
    )


def build_copy_page_url(payload: str, base_url: str | None = None) -> str:
    """Link to the public page that copies ``payload`` to the clipboard."""
    base_url = base_url or settings.app_url
    return f"{base_url.rstrip('/')}/pix/copiar?code={quote(payload, safe='')}"


def billing_input_for_student(
    student: Student,
    invoice: Invoice | None = None,
    *,
    pix_option: PixPaymentOption | None = None,
    today: date | None = None,
) -> BillingEmailInput | None:
    """Assemble the reminder input for a student's open charge.

    Without an invoice the student's plan amount is charged on this month's
    due day. Returns None when the invoice is already paid.
    """
    today = today or today_sp()
    if status_label(invoice, today) == STATUS_PAID:
        return None

    if invoice is not None:
        amount_cents = invoice.open_amount_cents
        due_date = invoice.due_date
    else:
        amount_cents = student.amount_cents
        _, _, due_date = current_period_dates(student.due_day, today)

    data = BillingEmailInput(
        customer_name=student.full_name,
        amount_cents=amount_cents,
        due_date=due_date,
    )
    if pix_option is not None:
        payload = pix_option.build_payload(amount_cents)
        data.pix_payload = payload
        data.pix_qr_code_data_url = generate_pix_qrcode_data_url(payload)
        data.pix_copy_url = build_copy_page_url(payload)
    return data
