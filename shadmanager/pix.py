"""PIX BR Code payload encoder/decoder following the BCB EMV QR Code specification.

Builds the "copia e cola" payload string for a static PIX charge, decodes and
validates payloads, and renders them as QR code images.
"""

from __future__ import annotations

import base64
import logging
import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from io import BytesIO

import qrcode
from pydantic import BaseModel
from qrcode.image.pil import PilImage

logger = logging.getLogger(__name__)

PIX_GUI = "BR.GOV.BCB.PIX"
DEFAULT_MERCHANT_NAME = "Shad Manager"
DEFAULT_MERCHANT_CITY = "Sao Paulo"
DEFAULT_TXID = "SHADMENSAL"

MERCHANT_NAME_MAX = 25
MERCHANT_CITY_MAX = 15
TXID_MAX = 25
DESCRIPTION_MAX = 40
KEY_MAX = 77
TLV_VALUE_MAX = 99
AMOUNT_MAX = Decimal("999999999.99")

CRC_TAG = "6304"

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9 .,\-/:@&+()']")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_WHITESPACE = re.compile(r"\s+")


class PixError(ValueError):
    """Base error for PIX payload handling."""


class InvalidKeyError(PixError):
    """The PIX key is blank or cannot be carried by a BR Code."""


class InvalidPayloadError(PixError):
    """A BR Code string is malformed or its checksum does not match."""


def sanitize(text: str, max_length: int) -> str:
    """Reduce free text to the BR Code character set and cut it to ``max_length``.

    Accented letters degrade to their base letter, characters outside the
    allowed set are dropped, whitespace is collapsed.
    """
    nfd = unicodedata.normalize("NFD", text or "")
    stripped = "".join(c for c in nfd if not unicodedata.combining(c))
    stripped = _DISALLOWED_CHARS.sub("", _WHITESPACE.sub(" ", stripped))
    return " ".join(stripped.split())[:max_length]


def tlv(tag: str, value: str) -> str:
    """Build a TLV (Tag-Length-Value) field."""
    if len(value) > TLV_VALUE_MAX:
        raise ValueError(f"TLV value for tag {tag} exceeds {TLV_VALUE_MAX} characters")
    return f"{tag}{len(value):02d}{value}"


def crc16(data: str) -> str:
    """Compute CRC16-CCITT (0xFFFF) over the payload string."""
    crc = 0xFFFF
    for byte in data.encode("ascii"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ 0x1021
            else:
                crc <<= 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def format_amount(amount: str | Decimal | float | None) -> str | None:
    """Format an amount for tag 54, or None when it should be omitted.

    Accepts '150', '150.00', '150,00' and '1.500,00'. Non-numeric, non-finite,
    non-positive and out-of-range amounts yield None.
    """
    if amount is None:
        return None
    raw = str(amount).strip()
    if not raw:
        return None
    if "," in raw:
        raw = raw.replace(".", "").replace(",", ".")
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0 or value > AMOUNT_MAX:
        return None
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value <= 0 or value > AMOUNT_MAX:
        return None
    return f"{value:.2f}"


def _sanitize_txid(txid: str) -> str:
    return _NON_ALNUM.sub("", sanitize(txid, len(txid or "")))[:TXID_MAX]


def build_pix_payload(
    *,
    key: str,
    amount: str | Decimal | float | None = None,
    merchant_name: str = "",
    merchant_city: str = "",
    txid: str = "",
    description: str = "",
) -> str:
    """Generate a PIX BR Code payload string.

    Args:
        key: The PIX key (CPF, CNPJ, phone, email, or random key). Kept verbatim.
        amount: Decimal amount in reais. Omitted from the payload when invalid.
        merchant_name: Recipient name (max 25 chars).
        merchant_city: Recipient city (max 15 chars).
        txid: Reference label, alphanumeric only (max 25 chars).
        description: Free text shown to the payer (max 40 chars).

    Returns:
        The complete BR Code payload string with CRC16.

    Raises:
        InvalidKeyError: if the key is blank, not ASCII or longer than 77 characters.
    """
    key = (key or "").strip()
    if not key:
        raise InvalidKeyError("Chave PIX inválida.")
    if len(key) > KEY_MAX:
        raise InvalidKeyError(f"Chave PIX excede {KEY_MAX} caracteres.")
    if not key.isascii():
        raise InvalidKeyError("Chave PIX contém caracteres não ASCII.")

    name = sanitize(merchant_name, MERCHANT_NAME_MAX) or DEFAULT_MERCHANT_NAME
    city = sanitize(merchant_city, MERCHANT_CITY_MAX) or DEFAULT_MERCHANT_CITY
    reference = _sanitize_txid(txid) or DEFAULT_TXID
    formatted_amount = format_amount(amount)

    # Merchant Account Information (tag 26)
    mai = tlv("00", PIX_GUI) + tlv("01", key)
    # Description must leave room for its own tag and length inside the group
    room = TLV_VALUE_MAX - len(mai) - 4
    info = sanitize(description, min(DESCRIPTION_MAX, max(room, 0))).strip()
    if info:
        mai += tlv("02", info)

    payload = (
        tlv("00", "01")  # Payload Format Indicator
        + tlv("26", mai)  # Merchant Account Information
        + tlv("52", "0000")  # Merchant Category Code
        + tlv("53", "986")  # Transaction Currency (BRL)
    )

    if formatted_amount:
        payload += tlv("54", formatted_amount)

    payload += (
        tlv("58", "BR")  # Country Code
        + tlv("59", name)  # Merchant Name
        + tlv("60", city)  # Merchant City
        + tlv("62", tlv("05", reference))  # Additional Data
    )

    # CRC16 placeholder: tag "63" + length "04" + actual CRC
    payload += CRC_TAG
    payload += crc16(payload)

    logger.debug(
        "PIX payload built: amount=%s txid=%s description=%s size=%d",
        formatted_amount,
        reference,
        bool(info),
        len(payload),
    )
    return payload


class PixPayload(BaseModel):
    """Fields decoded from a BR Code string."""

    key: str
    description: str = ""
    amount: str | None = None
    merchant_name: str = ""
    merchant_city: str = ""
    txid: str = ""
    currency: str = ""
    country: str = ""
    crc: str
    tags: dict[str, str] = {}  # top-level tags in payload order


def parse_tlv(data: str) -> dict[str, str]:
    """Split a TLV string into an ordered ``{tag: value}`` mapping."""
    fields: dict[str, str] = {}
    i = 0
    while i < len(data):
        if i + 4 > len(data):
            raise InvalidPayloadError(f"Truncated TLV header at position {i}")
        tag = data[i : i + 2]
        length_str = data[i + 2 : i + 4]
        if not length_str.isdigit():
            raise InvalidPayloadError(f"Invalid length '{length_str}' for tag {tag}")
        length = int(length_str)
        end = i + 4 + length
        if end > len(data):
            raise InvalidPayloadError(f"Tag {tag} declares {length} characters past the end of data")
        fields[tag] = data[i + 4 : end]
        i = end
    return fields


def parse_pix_payload(payload: str) -> PixPayload:
    """Decode a BR Code string, verifying its trailing CRC16.

    Raises:
        InvalidPayloadError: if the payload is malformed or the checksum fails.
    """
    payload = (payload or "").strip()
    if len(payload) < 8 or payload[-8:-4] != CRC_TAG:
        raise InvalidPayloadError("Código PIX sem campo CRC.")
    try:
        expected = crc16(payload[:-4])
    except UnicodeEncodeError as exc:
        raise InvalidPayloadError("Código PIX contém caracteres não ASCII.") from exc
    if expected != payload[-4:].upper():
        raise InvalidPayloadError(f"CRC inválido: esperado {expected}, encontrado {payload[-4:]}")

    fields = parse_tlv(payload)
    account = parse_tlv(fields.get("26", ""))
    if account.get("00", "").upper() != PIX_GUI or not account.get("01"):
        raise InvalidPayloadError("Código PIX sem chave.")
    additional = parse_tlv(fields.get("62", ""))

    return PixPayload(
        key=account["01"],
        description=account.get("02", ""),
        amount=fields.get("54"),
        merchant_name=fields.get("59", ""),
        merchant_city=fields.get("60", ""),
        txid=additional.get("05", ""),
        currency=fields.get("53", ""),
        country=fields.get("58", ""),
        crc=fields["63"],
        tags=fields,
    )


def is_valid_pix_payload(payload: str) -> bool:
    """Return True when ``payload`` decodes and its CRC matches."""
    try:
        parse_pix_payload(payload)
    except InvalidPayloadError:
        return False
    return True


def generate_pix_qrcode_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Generate a PIX QR code as PNG bytes.

    Returns:
        PNG image bytes ready to be saved or embedded in a PDF or e-mail.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img: PilImage = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_pix_qrcode_data_url(payload: str) -> str:
    """Generate a PIX QR code as a ``data:image/png;base64,...`` URL."""
    encoded = base64.b64encode(generate_pix_qrcode_png(payload)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
