from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from shadmanager.models import cents_to_amount
from shadmanager.pix import (
    DEFAULT_MERCHANT_CITY,
    DEFAULT_MERCHANT_NAME,
    DEFAULT_TXID,
    build_pix_payload,
)


def _read_str(row: dict[str, Any], field: str) -> str:
    value = row.get(field)
    return value.strip() if isinstance(value, str) else ""


class PixPaymentOption(BaseModel):
    """PIX receiving account configured for an organization."""

    key: str
    merchant_name: str = DEFAULT_MERCHANT_NAME
    merchant_city: str = DEFAULT_MERCHANT_CITY
    description: str = ""
    txid: str = DEFAULT_TXID
    saved_payload: str | None = None
    saved_qr_code_data_url: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> PixPaymentOption | None:
        """Read the option from an organization settings row.

        Returns None when PIX is disabled or no key is configured.
        """
        if not row:
            return None
        key = _read_str(row, "pix_key")
        if row.get("pix_payment_enabled") is not True or not key:
            return None
        return cls(
            key=key,
            merchant_name=_read_str(row, "pix_merchant_name") or DEFAULT_MERCHANT_NAME,
            merchant_city=_read_str(row, "pix_merchant_city") or DEFAULT_MERCHANT_CITY,
            description=_read_str(row, "pix_description"),
            txid=_read_str(row, "pix_txid") or DEFAULT_TXID,
            saved_payload=_read_str(row, "pix_saved_payload") or None,
            saved_qr_code_data_url=_read_str(row, "pix_saved_qr_image_data_url") or None,
        )

    def build_payload(self, amount_cents: int | None = None) -> str:
        """Build the BR Code for this account, with a fixed amount when positive."""
        amount = cents_to_amount(amount_cents) if amount_cents and amount_cents > 0 else None
        return build_pix_payload(
            key=self.key,
            amount=amount,
            merchant_name=self.merchant_name,
            merchant_city=self.merchant_city,
            txid=self.txid,
            description=self.description,
        )
