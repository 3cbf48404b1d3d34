"""
HTML snippets for the Streamlit dashboard.

Names, dates and the currency symbol come from the spreadsheet or the
environment, so every value is escaped before it reaches markup rendered
with unsafe_allow_html.
"""

from decimal import Decimal
from html import escape
from typing import Optional

from src.models.report import PaymentInfo


def availability_note(info: PaymentInfo) -> str:
    if info.available_until:
        return (
            f"Paid until {info.available_until.date} "
            f"({info.available_until.display_date})"
        )
    if info.is_overdue:
        return "Overdue"
    return ""


def member_card_html(
    name: Optional[str],
    info: PaymentInfo,
    currency: str,
) -> str:
    """One member's standing on one service."""
    css = "overdue" if info.is_overdue else "in-credit"
    currency = escape(currency)
    return f"""
    <div class="member-card {css}">
        <strong>{escape(name or "Unknown member")}</strong>
        <span class="big-number" style="float:right">
            {escape(info.credit.display)}{currency}
        </span>
        <br/>
        <small>{info.price_per_head}{currency}/month · paid {info.paid}{currency} · {escape(availability_note(info))}</small>
    </div>
    """


def amount_html(amount: Decimal, currency: str) -> str:
    return f'<p class="big-number">{amount}{escape(currency)}</p>'
