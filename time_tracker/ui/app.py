"""Streamlit time entry page.

Calls the same EntryService as the API and CLI. No business logic here.

    streamlit run time_tracker/ui/app.py
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import streamlit as st

from time_tracker.config import configure_logging, load_settings
from time_tracker.models import Project, TimeTrackerError
from time_tracker.service import EntryService
from time_tracker.storage import create_store


@st.cache_resource
def _service() -> EntryService:
    settings = load_settings()
    configure_logging(settings.log_level)
    return EntryService(create_store(settings.database_url))


def _entry_form(service: EntryService) -> None:
    st.subheader("Time Entry")

    col1, col2 = st.columns(2)
    with col1:
        day = st.date_input("Date", value=date.today())
        hours = st.number_input("Hours", min_value=0.0, value=1.0, step=0.25)
    with col2:
        project = st.selectbox("Project", Project.labels())

    description = st.text_area("Work description", placeholder="What did you work on?")

    if st.button("Save", type="primary"):
        # Early warning only; the service enforces the cap on save
        remaining = service.remaining_hours(day)
        if Decimal(str(hours)) > remaining:
            st.error(f"This would exceed {service.max_hours_per_day} hours for {day.isoformat()}.")
            return
        try:
            entry = service.create_entry({
                "date": day.isoformat(),
                "project": project,
                "hours": hours,
                "description": description,
            })
        except TimeTrackerError as e:
            for err in e.errors:
                st.error(err)
            return
        st.success(f"Saved entry #{entry.id}")


def _history(service: EntryService) -> None:
    st.subheader("Entry History")

    years, _ = service.filter_options()
    mode = st.radio("Show", ["All", "By month"], horizontal=True)

    year = month = None
    if mode == "By month" and years:
        col1, col2 = st.columns(2)
        with col1:
            year = st.selectbox("Year", years)
        _, months = service.filter_options(year)
        with col2:
            month = st.selectbox("Month", months, format_func=lambda m: m.value)

    history = service.history(year, month)
    st.markdown(f"Grand total: **{history.grand_total:.2f}**h")

    if not history.buckets:
        st.info("No entries yet.")
        return

    for bucket in history.buckets:
        st.markdown(f"**{bucket.date.isoformat()}**  Total: **{bucket.total:.2f}**h")
        st.table([
            {
                "Project": e.project.value,
                "Hours": f"{e.hours:.2f}",
                "Description": e.description,
            }
            for e in bucket.entries
        ])
        for e in bucket.entries:
            if st.button(f"Delete #{e.id}", key=f"delete-{e.id}"):
                try:
                    service.delete_entry(e.id)
                except TimeTrackerError as err:
                    st.error(err.message)
                else:
                    st.rerun()


def main() -> None:
    st.set_page_config(page_title="Time Tracker", layout="wide")
    st.title("Time Tracker")

    service = _service()
    _entry_form(service)
    _history(service)


if __name__ == "__main__":
    main()
