from __future__ import annotations

import logging
from datetime import date
from io import BytesIO

from fpdf import FPDF

from shadmanager.constants import format_date
from shadmanager.models import format_brl
from shadmanager.pix import generate_pix_qrcode_png

logger = logging.getLogger(__name__)

FONT = "Helvetica"

PRIMARY = "#0F172A"
PRIMARY_LIGHT = "#F1F5F9"
ACCENT = "#F07F1D"
TEXT_COLOR = "#1E293B"
TEXT_CONTRAST = "#FFFFFF"


def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def _latin1(text: str) -> str:
    """Core PDF fonts only cover Latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


class ChargePDF:
    """Single-page PIX charge: amount, due date, QR code and copy-and-paste code."""

    def generate(
        self,
        *,
        title: str,
        amount_cents: int | None,
        due_date: date | None,
        pix_payload: str,
        pix_key: str = "",
        customer_name: str = "",
        accent_color: str = ACCENT,
    ) -> bytes:
        self._colors = {
            "primary": _hex_to_rgb(PRIMARY),
            "primary_light": _hex_to_rgb(PRIMARY_LIGHT),
            "accent": _hex_to_rgb(accent_color),
            "text_color": _hex_to_rgb(TEXT_COLOR),
            "text_contrast": _hex_to_rgb(TEXT_CONTRAST),
            "muted_text": tuple(min(255, c + 68) for c in _hex_to_rgb(TEXT_COLOR)),
            "border_color": tuple(max(0, c - 28) for c in _hex_to_rgb(PRIMARY_LIGHT)),
        }

        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)
        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_header(pdf, page_w, title)

        card_w = page_w / 2 - 3
        card_y = pdf.get_y()
        amount_label = format_brl(amount_cents) if amount_cents and amount_cents > 0 else "Valor livre"
        due_label = format_date(due_date) if due_date else "Sem vencimento"
        self._draw_info_card(pdf, pdf.l_margin, card_y, card_w, 24, "VALOR", amount_label)
        self._draw_info_card(pdf, pdf.l_margin + card_w + 6, card_y, card_w, 24, "VENCIMENTO", due_label)
        pdf.set_y(card_y + 24 + 8)

        if customer_name:
            pdf.set_font(FONT, "", 10)
            pdf.set_text_color(*self._colors["text_color"])
            pdf.cell(0, 6, _latin1(f"Cliente: {customer_name}"), new_x="LMARGIN", new_y="NEXT")
            pdf.ln(4)

        self._draw_qrcode(pdf, page_w, pix_payload)
        if pix_key:
            self._draw_labeled_box(pdf, page_w, "CHAVE PIX", pix_key, font_size=11)
        self._draw_labeled_box(pdf, page_w, "PIX COPIA E COLA", pix_payload, font_size=7)
        self._draw_footer(pdf, page_w)

        output = bytes(pdf.output())
        logger.debug(
            "Charge PDF generated: title=%s amount=%s size=%d bytes",
            title,
            amount_cents,
            len(output),
        )
        return output

    def _draw_header(self, pdf: FPDF, page_w: float, title: str) -> None:
        c = self._colors
        x = pdf.l_margin
        y = pdf.get_y()

        pdf.set_fill_color(*c["primary"])
        pdf.rect(x, y, page_w, 34, "F")
        pdf.set_fill_color(*c["accent"])
        pdf.rect(x, y + 34, page_w, 2, "F")

        pdf.set_y(y + 7)
        pdf.set_text_color(*c["text_contrast"])
        pdf.set_font(FONT, "B", 22)
        pdf.cell(0, 12, "PAGAMENTO VIA PIX", align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 10)
        pdf.cell(0, 6, _latin1(title), align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_y(y + 36 + 10)

    def _draw_info_card(
        self,
        pdf: FPDF,
        x: float,
        y: float,
        w: float,
        h: float,
        label: str,
        value: str,
    ) -> None:
        c = self._colors
        pdf.set_fill_color(*c["primary_light"])
        pdf.rect(x, y, w, h, "F")
        pdf.set_fill_color(*c["accent"])
        pdf.rect(x, y, 3, h, "F")

        pdf.set_xy(x + 10, y + 3)
        pdf.set_font(FONT, "B", 7)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(w - 14, 5, label, new_x="LEFT", new_y="NEXT")
        pdf.set_x(x + 10)
        pdf.set_font(FONT, "B", 13)
        pdf.set_text_color(*c["text_color"])
        pdf.cell(w - 14, 9, _latin1(value))

    def _draw_qrcode(self, pdf: FPDF, page_w: float, pix_payload: str) -> None:
        qr_size = 60
        qr_x = pdf.l_margin + (page_w - qr_size) / 2
        qr_y = pdf.get_y()
        pdf.image(BytesIO(generate_pix_qrcode_png(pix_payload)), x=qr_x, y=qr_y, w=qr_size, h=qr_size)
        pdf.set_y(qr_y + qr_size + 4)

        pdf.set_font(FONT, "", 10)
        pdf.set_text_color(*self._colors["muted_text"])
        pdf.cell(
            0,
            6,
            _latin1("Escaneie o QR Code ou copie o código abaixo"),
            align="C",
            new_x="LMARGIN",
            new_y="NEXT",
        )
        pdf.ln(8)

    def _draw_labeled_box(self, pdf: FPDF, page_w: float, label: str, value: str, font_size: int) -> None:
        c = self._colors
        x = pdf.l_margin
        line_h = font_size * 0.55

        pdf.set_font(FONT, "B", 8)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(0, 5, label, new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)

        box_y = pdf.get_y()
        cell_w = page_w - 12
        pdf.set_font(FONT, "", font_size)
        lines = pdf.multi_cell(cell_w, line_h, _latin1(value), dry_run=True, output="LINES")
        box_h = len(lines) * line_h + 8

        pdf.set_fill_color(*c["primary_light"])
        pdf.rect(x, box_y, page_w, box_h, "F")
        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        pdf.rect(x, box_y, page_w, box_h, "D")

        pdf.set_xy(x + 6, box_y + 4)
        pdf.set_text_color(*c["text_color"])
        pdf.multi_cell(cell_w, line_h, _latin1(value))
        pdf.set_y(box_y + box_h + 8)

    def _draw_footer(self, pdf: FPDF, page_w: float) -> None:
        c = self._colors
        pdf.set_y(-30)
        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(5)
        pdf.set_font(FONT, "", 7)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(0, 5, "Documento gerado automaticamente", align="C")
