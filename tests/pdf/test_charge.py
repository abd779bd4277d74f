from datetime import date

from shadmanager.pdf.charge import ChargePDF, _latin1
from shadmanager.pix import build_pix_payload


class TestChargePDF:
    def _payload(self, **overrides):
        defaults = dict(key="financeiro@academia.com", amount="150", description="Mensalidade abril")
        defaults.update(overrides)
        return build_pix_payload(**defaults)

    def test_generate_returns_pdf_bytes(self):
        result = ChargePDF().generate(
            title="Mensalidade Abril/2025",
            amount_cents=15000,
            due_date=date(2025, 4, 10),
            pix_payload=self._payload(),
            pix_key="financeiro@academia.com",
            customer_name="João da Silva",
        )
        assert isinstance(result, bytes)
        assert result[:5] == b"%PDF-"

    def test_generate_open_amount(self):
        result = ChargePDF().generate(
            title="Contribuição",
            amount_cents=None,
            due_date=None,
            pix_payload=self._payload(amount=None),
        )
        assert result[:5] == b"%PDF-"

    def test_long_key_and_payload(self):
        result = ChargePDF().generate(
            title="Mensalidade",
            amount_cents=15000,
            due_date=date(2025, 4, 10),
            pix_payload=self._payload(key="a" * 77),
            pix_key="a" * 77,
            accent_color="#357B7C",
        )
        assert result[:5] == b"%PDF-"


class TestLatin1:
    def test_keeps_portuguese(self):
        assert _latin1("Cobrança João") == "Cobrança João"

    def test_replaces_unsupported(self):
        assert _latin1("Pagamento ✓ PIX") == "Pagamento ? PIX"
