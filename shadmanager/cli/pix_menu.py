from __future__ import annotations

from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from shadmanager.models import format_brl, parse_brl
from shadmanager.pix import (
    PixError,
    build_pix_payload,
    format_amount,
    generate_pix_qrcode_png,
    parse_pix_payload,
)
from shadmanager.settings import settings

console = Console()

FIELD_LABELS = {
    "00": "Payload Format Indicator",
    "26": "Merchant Account Information",
    "52": "Merchant Category Code",
    "53": "Transaction Currency",
    "54": "Transaction Amount",
    "58": "Country Code",
    "59": "Merchant Name",
    "60": "Merchant City",
    "62": "Additional Data Field",
    "63": "CRC16",
}


def generate_pix_menu() -> str | None:
    console.print()
    console.print("[bold]Gerar Código PIX[/bold]", style="cyan")

    key = questionary.text("Chave PIX:", default=settings.pix_key).ask()
    if key is None:
        return None

    amount = questionary.text("Valor (ex: 150,00, opcional):").ask() or ""
    if amount.strip() and format_amount(amount) is None:
        console.print("[yellow]Valor inválido, o código será gerado sem valor fixo.[/yellow]")

    merchant_name = questionary.text("Nome do recebedor:", default=settings.pix_merchant_name).ask() or ""
    merchant_city = questionary.text("Cidade do recebedor:", default=settings.pix_merchant_city).ask() or ""
    txid = questionary.text("Identificador (txid):", default=settings.pix_txid).ask() or ""
    description = questionary.text("Descrição (opcional):", default=settings.pix_description).ask() or ""

    try:
        payload = build_pix_payload(
            key=key,
            amount=amount,
            merchant_name=merchant_name,
            merchant_city=merchant_city,
            txid=txid,
            description=description,
        )
    except PixError as e:
        console.print(f"[red]{e}[/red]")
        return None

    console.print()
    console.print("[green bold]Código PIX gerado![/green bold]")
    console.print(payload, soft_wrap=True)

    if questionary.confirm("Salvar QR Code em PNG?", default=False).ask():
        path = questionary.text("Arquivo:", default="pix-qrcode.png").ask()
        if path:
            Path(path).write_bytes(generate_pix_qrcode_png(payload))
            console.print(f"  [green]QR Code salvo em {path}[/green]")

    return payload


def inspect_pix_menu() -> None:
    console.print()
    console.print("[bold]Validar Código PIX[/bold]", style="cyan")

    payload = questionary.text("Cole o código PIX:").ask()
    if not payload:
        return

    try:
        decoded = parse_pix_payload(payload)
    except PixError as e:
        console.print(f"[red]Código inválido: {e}[/red]")
        return

    table = Table()
    table.add_column("Campo")
    table.add_column("Descrição")
    table.add_column("Valor")
    for tag, value in decoded.tags.items():
        table.add_row(tag, FIELD_LABELS.get(tag, "Desconhecido"), value)
    console.print(table)

    console.print(f"  Chave: [bold]{decoded.key}[/bold]")
    if decoded.amount:
        console.print(f"  Valor: [bold]{format_brl(parse_brl(decoded.amount) or 0)}[/bold]")
    else:
        console.print("  Valor: livre")
    if decoded.description:
        console.print(f"  Descrição: {decoded.description}")
    console.print(f"  Recebedor: {decoded.merchant_name} ({decoded.merchant_city})")
    console.print(f"  txid: {decoded.txid}")
    console.print("[green]CRC válido.[/green]")
