"""Root conftest: shared sample data and a controllable clock."""

from __future__ import annotations

import pytest


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _pix_row(**overrides) -> dict:
    defaults = dict(
        pix_payment_enabled=True,
        pix_key="financeiro@academia.com",
        pix_merchant_name="Academia Força",
        pix_merchant_city="Curitiba",
        pix_description="Mensalidade",
        pix_txid="MENSAL",
        pix_saved_payload=None,
        pix_saved_qr_image_data_url=None,
    )
    defaults.update(overrides)
    return defaults


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def pix_row():
    return _pix_row
