from zoneinfo import ZoneInfo

SP_TZ = ZoneInfo("America/Sao_Paulo")

STATUS_PAID = "Pago"
STATUS_DELINQUENT = "Inadimplente"
STATUS_UPCOMING = "Próximo do vencimento"

BILLING_CYCLE_LABELS = {
    "monthly": "Mensal",
    "weekly": "Semanal",
    "quarterly": "Trimestral",
}


def format_date(value) -> str:
    """Format a date as DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")
