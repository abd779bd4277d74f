from shadmanager.models.pix_option import PixPaymentOption
from shadmanager.pix import parse_pix_payload


class TestFromRow:
    def test_enabled(self, pix_row):
        option = PixPaymentOption.from_row(pix_row())
        assert option.key == "financeiro@academia.com"
        assert option.merchant_name == "Academia Força"
        assert option.merchant_city == "Curitiba"
        assert option.description == "Mensalidade"
        assert option.txid == "MENSAL"
        assert option.saved_payload is None

    def test_none_row(self):
        assert PixPaymentOption.from_row(None) is None

    def test_disabled(self, pix_row):
        assert PixPaymentOption.from_row(pix_row(pix_payment_enabled=False)) is None

    def test_enabled_must_be_true(self, pix_row):
        assert PixPaymentOption.from_row(pix_row(pix_payment_enabled="true")) is None

    def test_blank_key(self, pix_row):
        assert PixPaymentOption.from_row(pix_row(pix_key="   ")) is None

    def test_non_string_key(self, pix_row):
        assert PixPaymentOption.from_row(pix_row(pix_key=123)) is None

    def test_defaults_for_blank_fields(self, pix_row):
        option = PixPaymentOption.from_row(
            pix_row(pix_merchant_name=" ", pix_merchant_city=None, pix_txid="", pix_description=None)
        )
        assert option.merchant_name == "Shad Manager"
        assert option.merchant_city == "Sao Paulo"
        assert option.txid == "SHADMENSAL"
        assert option.description == ""

    def test_saved_values_trimmed(self, pix_row):
        option = PixPaymentOption.from_row(
            pix_row(pix_saved_payload="  0002016304ABCD ", pix_saved_qr_image_data_url="")
        )
        assert option.saved_payload == "0002016304ABCD"
        assert option.saved_qr_code_data_url is None


class TestBuildPayload:
    def test_with_amount(self, pix_row):
        option = PixPaymentOption.from_row(pix_row())
        decoded = parse_pix_payload(option.build_payload(15050))
        assert decoded.amount == "150.50"
        assert decoded.key == "financeiro@academia.com"
        assert decoded.merchant_name == "Academia Forca"
        assert decoded.txid == "MENSAL"
        assert decoded.description == "Mensalidade"

    def test_without_amount(self, pix_row):
        option = PixPaymentOption.from_row(pix_row())
        assert parse_pix_payload(option.build_payload()).amount is None

    def test_non_positive_amount_ignored(self, pix_row):
        option = PixPaymentOption.from_row(pix_row())
        assert parse_pix_payload(option.build_payload(0)).amount is None
        assert parse_pix_payload(option.build_payload(-100)).amount is None
