"""
The three in-app views: Dashboard, Data Entry, Reports.
"""
import logging
from datetime import date, timedelta

import streamlit as st

from mis_report.config import NUMERIC_FIELDS, REPORT_TYPES, config
from mis_report.data.loader import load_dashboard_batch, load_report_batch, save_entry
from mis_report.data.schema import OperationEntry, parse_company_names
from mis_report.data.store import RecordStore
from mis_report.errors import StoreError, ValidationError
from mis_report.exports import export_report_csv, export_report_excel
from mis_report.metrics.operations import compute_totals, group_by_date, group_by_team
from mis_report.reports.composer import compose_report
from mis_report.ui.charts import daily_calls_chart, team_calls_chart
from mis_report.ui.components import metric_cards, no_data_message, records_preview, render_report
from mis_report.ui.state import AppState

logger = logging.getLogger(__name__)


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard(app_state: AppState, store: RecordStore):
    """KPI cards and the two charts over the bounded dashboard batch."""
    try:
        with st.spinner("Loading data..."):
            df = load_dashboard_batch(store)
    except StoreError as exc:
        logger.error("Error loading dashboard: %s", exc)
        st.error("Error loading dashboard data. Please try again.")
        no_data_message()
        return

    if len(df) == 0:
        no_data_message()
        return

    metric_cards(compute_totals(df))

    col1, col2 = st.columns(2)
    with col1:
        fig = app_state.replace_chart("daily", daily_calls_chart(group_by_date(df)))
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        fig = app_state.replace_chart("team", team_calls_chart(group_by_team(df)))
        st.plotly_chart(fig, use_container_width=True)


# =============================================================================
# DATA ENTRY
# =============================================================================

def render_data_entry(app_state: AppState, store: RecordStore):
    """Daily activity form. Validation runs before anything is written."""
    st.subheader("Daily Data Entry")

    with st.form("data_entry_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            entry_date = st.date_input("Date", value=date.today())
        with col2:
            employee_name = st.text_input("Employee Name")
        with col3:
            team = st.text_input("Team")

        counters = {}
        cols = st.columns(3)
        for i, (key, label) in enumerate(NUMERIC_FIELDS.items()):
            with cols[i % 3]:
                counters[key] = st.number_input(label, min_value=0, value=0, step=1, key=f"entry_{key}")

        company_names = st.text_area("Company Names (comma-separated)")

        submit_col, cancel_col = st.columns([1, 5])
        with submit_col:
            submitted = st.form_submit_button("Save")
        with cancel_col:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        app_state.show_dashboard()
        st.rerun()

    if not submitted:
        return

    entry = OperationEntry(
        entry_date=entry_date,
        employee_name=employee_name,
        team=team,
        company_names=parse_company_names(company_names),
        **{key: int(value) for key, value in counters.items()},
    )

    try:
        with st.spinner("Saving..."):
            doc_id = save_entry(store, entry)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except StoreError as exc:
        logger.error("Error saving data: %s", exc)
        st.error("Error saving data. Please try again.")
        return

    logger.info("Saved operation record %s for %s", doc_id, entry.employee_name)
    st.toast("Data saved successfully!")
    app_state.show_dashboard()
    st.rerun()


# =============================================================================
# REPORTS
# =============================================================================

def render_reports(app_state: AppState, store: RecordStore):
    """Report generator plus the last generated report and its exports."""
    st.subheader("Reports")

    today = date.today()
    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])
    with col1:
        report_type = st.selectbox(
            "Report Type",
            options=list(REPORT_TYPES.keys()),
            format_func=lambda x: REPORT_TYPES[x],
        )
    with col2:
        start_date = st.date_input("Start Date", value=today - timedelta(days=config.report_default_days))
    with col3:
        end_date = st.date_input("End Date", value=today)
    with col4:
        st.write("")
        generate = st.button("Generate", type="primary", use_container_width=True)

    if generate:
        if not start_date or not end_date:
            st.warning("Please select start and end dates")
        else:
            try:
                with st.spinner("Generating report..."):
                    df = load_report_batch(store)
                    report = compose_report(df, start_date, end_date, report_type)
            except StoreError as exc:
                logger.error("Error generating report: %s", exc)
                st.error("Error generating report. Please try again.")
            else:
                app_state.set_report(report)
                logger.info(
                    "Generated %s report %s..%s with %d records",
                    report_type, start_date, end_date, report.record_count,
                )

    report = app_state.report
    if report is None:
        st.caption("Choose a period and generate a report.")
        return

    st.markdown(f"### {REPORT_TYPES.get(report.report_type, 'Report')}")
    render_report(report)

    if report.is_empty:
        return

    fig = app_state.replace_chart("report_daily", daily_calls_chart(report.daily, title="Calls over Period"))
    st.plotly_chart(fig, use_container_width=True)
    records_preview(report.records)

    render_export_buttons(app_state)


def render_export_buttons(app_state: AppState):
    """Download buttons for the last generated report."""
    try:
        excel_bytes, excel_name = export_report_excel(app_state.report)
        csv_bytes, csv_name = export_report_csv(app_state.report)
    except ValidationError as exc:
        st.warning(str(exc))
        return

    col1, col2, _ = st.columns([1, 1, 4])
    with col1:
        st.download_button(
            "Export to Excel",
            data=excel_bytes,
            file_name=excel_name,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    with col2:
        st.download_button("Export to CSV", data=csv_bytes, file_name=csv_name, mime="text/csv")


VIEW_RENDERERS = {
    "dashboard": render_dashboard,
    "data_entry": render_data_entry,
    "reports": render_reports,
}


def render_active_view(app_state: AppState, store: RecordStore):
    VIEW_RENDERERS[app_state.active_view](app_state, store)
