"""
Streamlit Frontend for Subscription Splitter

The page the household opens to see who owes what.

DESIGN PRINCIPLES:
1. One glance per service: who shares it, who is ahead, who is behind
2. Overdue members stand out
3. Numbers always come from a fresh snapshot (reused for a few seconds)
4. No editing here; the spreadsheet is the place to record payments
"""

import asyncio
from datetime import datetime

import streamlit as st

from src.config import get_settings
from src.dashboard import amount_html, member_card_html
from src.models.report import MemberOwedReport, ServiceReport
from src.orchestrator import create_report_flow


# Page configuration
st.set_page_config(
    page_title="My Subscription",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .member-card {
        padding: 12px 16px;
        background-color: #ffffff;
        border: 1px solid #e5e7eb;
        border-radius: 10px;
        margin: 6px 0;
    }
    .overdue {
        border-left: 5px solid #dc3545;
    }
    .in-credit {
        border-left: 5px solid #28a745;
    }
    .big-number {
        font-size: 1.6em;
        font-weight: bold;
        font-variant-numeric: tabular-nums;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_flow():
    """Get or create the report flow (cached for the session)."""
    return create_report_flow(use_storage=True)


@st.cache_data(ttl=get_settings().report.cache_ttl_seconds)
def load_service_report() -> list[dict]:
    return [
        report.model_dump(mode="json", by_alias=True)
        for report in run_async(get_flow().service_report(now=datetime.now()))
    ]


@st.cache_data(ttl=get_settings().report.cache_ttl_seconds)
def load_owed_report() -> list[dict]:
    return [
        report.model_dump(mode="json", by_alias=True)
        for report in run_async(get_flow().member_owed_report(now=datetime.now()))
    ]


def main():
    """Main application entry point."""
    st.sidebar.title("💸 My Subscription")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📺 By Service", "🧾 Outstanding", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Refresh now"):
        load_service_report.clear()
        load_owed_report.clear()

    if page == "📺 By Service":
        render_service_page()
    elif page == "🧾 Outstanding":
        render_outstanding_page()
    elif page == "⚙️ Settings":
        render_settings_page()


def render_service_page():
    """Render each service with the members sharing it."""
    st.title("📺 By Service")
    currency = get_settings().report.currency_symbol

    try:
        reports = [ServiceReport.model_validate(r) for r in load_service_report()]
    except Exception as e:
        st.error(f"Could not build the report: {e}")
        return

    if not reports:
        st.info("No services found. Add a service to the spreadsheet to get started.")
        return

    for report in reports:
        st.subheader(report.service_name)
        if not report.members:
            st.caption("Nobody shares this service right now.")
            continue

        for member in report.members:
            st.markdown(
                member_card_html(member.name, member.payment_info, currency),
                unsafe_allow_html=True,
            )


def render_outstanding_page():
    """Render paid minus owed per member and service."""
    st.title("🧾 Outstanding")
    currency = get_settings().report.currency_symbol

    try:
        reports = [MemberOwedReport.model_validate(r) for r in load_owed_report()]
    except Exception as e:
        st.error(f"Could not build the report: {e}")
        return

    if not reports:
        st.info("No payments recorded yet.")
        return

    for report in reports:
        st.subheader(report.member_name or report.owner_id)
        for line in report.subscribed_service:
            col1, col2 = st.columns([3, 1])
            with col1:
                st.markdown(f"**{line.service}**")
                st.caption(
                    f"Paid {line.total_paid_amount}{currency} · "
                    f"owes {line.need_to_pay_amount}{currency}"
                )
            with col2:
                st.markdown(
                    amount_html(line.outstanding, currency),
                    unsafe_allow_html=True,
                )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    from src.config import validate_all_settings

    status = validate_all_settings()

    sections = [
        ("Google Sheets (Data Source)", "google_sheets"),
        ("Report", "report"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your "
        "spreadsheet settings. See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
