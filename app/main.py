"""
Streamlit Frontend for Bond Journal Drill

Students work through the bond scenarios one at a time: read the
bond details, write the journal entry, check it, then move on.

DESIGN PRINCIPLES:
1. One scenario on screen at a time
2. A correct answer never jumps ahead - the student presses Next
3. The solution is always one click away
4. Saving happens in the background; a failed save never blocks the student

Open with ?email=<student email>&first_name=<name> to keep progress
between visits. Without an email, progress lasts for the browser session.
"""

import asyncio
import time

import streamlit as st
from pydantic import ValidationError

from journal_drill.config import get_settings, validate_all_settings
from journal_drill.formatting import format_calc_key, format_currency, format_percentage
from journal_drill.models.scenario import CandidateLine, Scenario
from journal_drill.orchestrator import DrillSession, create_app_components


settings = get_settings()

# Page configuration
st.set_page_config(
    page_title=settings.app.page_title,
    page_icon="📒",
    layout="wide",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
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


def run_action(session: DrillSession, coro):
    """
    Run one session action and wait for its background saves.

    Each Streamlit run gets its own event loop, so pending writes have
    to finish before the loop is closed.
    """
    async def _act():
        result = await coro
        await session.drain()
        return result

    return run_async(_act())


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_app_components(use_storage=False)


def get_session() -> DrillSession:
    """The student's DrillSession, created once per browser session."""
    if "drill_session" not in st.session_state:
        catalog, storage, audit_logger = get_components()
        email = st.query_params.get("email")
        st.session_state.drill_session = run_async(
            DrillSession.start(
                catalog=catalog,
                storage=storage,
                identity=email,
                audit_logger=audit_logger,
            )
        )
        st.session_state.outcome = None
        st.session_state.show_solution = False
        st.session_state.feedback_shown_at = None
    return st.session_state.drill_session


def clear_feedback():
    st.session_state.outcome = None
    st.session_state.show_solution = False
    st.session_state.feedback_shown_at = None


def main():
    """Main application entry point."""
    session = get_session()

    render_sidebar(session)
    render_header(session)

    if session.is_done:
        render_finished_page(session)
        return

    scenario = session.current_scenario
    render_scenario_details(scenario)
    render_entry_form(session, scenario)
    render_feedback()

    if st.session_state.show_solution:
        render_solution(scenario)


def render_sidebar(session: DrillSession):
    """How-to notes and storage status."""
    st.sidebar.title("📒 Bond Journal Drill")
    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Read the bond details and the task
        2. Enter one account per line with its debit or credit
        3. Check your answer, then move to the next question
        """
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown("**Connection Status**")

    status = validate_all_settings()
    if not session.identity:
        st.sidebar.info("No email in the link - progress is kept for this visit only")
    elif status.get("google_sheets", False):
        st.sidebar.success("✅ Google Sheets (Storage) - Connected")
    elif "google_sheets" in status:
        error = status.get("google_sheets_error", "Not configured")
        st.sidebar.error(f"❌ Google Sheets (Storage) - {error}")
    else:
        st.sidebar.info("Progress is kept in memory on this server")


def render_header(session: DrillSession):
    """Greeting, position in the catalog and progress figures."""
    first_name = st.query_params.get("first_name")
    summary = session.summary
    catalog = session.catalog

    st.title(f"📒 {settings.app.page_title}")
    if first_name:
        st.markdown(f"Welcome back, **{first_name}**!")

    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        if session.is_done:
            st.metric("Scenario", "All done")
        else:
            position = catalog.position(session.current_scenario.id)
            st.metric("Scenario", f"{position} of {len(catalog)}")

    with col2:
        st.metric("Completed", f"{summary.solved_count} / {summary.total_scenarios}")

    with col3:
        st.metric("Mastery", f"{summary.mastery_level:.0%}")

    with col4:
        if st.button("🔄 Reset"):
            st.session_state.confirm_reset = True

    st.progress(summary.progress_percentage / 100, text=f"{summary.progress_percentage}% attempted")

    if st.session_state.get("confirm_reset"):
        st.warning("Are you sure you want to reset your progress? This cannot be undone.")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Yes, reset", type="primary"):
                run_action(session, session.reset())
                st.session_state.confirm_reset = False
                clear_feedback()
                st.rerun()
        with col2:
            if st.button("Cancel"):
                st.session_state.confirm_reset = False
                st.rerun()

    st.markdown("---")


def render_scenario_details(scenario: Scenario):
    """Bond details and the task."""
    st.subheader(f"Scenario {scenario.id}")

    col1, col2 = st.columns(2)

    with col1:
        st.markdown(f"**Face value:** {format_currency(scenario.face_value)}")
        st.markdown(f"**Issue price:** {format_currency(scenario.issue_price)}")
        st.markdown(f"**Bond type:** {scenario.bond_type.value.title()}")

    with col2:
        st.markdown(f"**Stated rate:** {format_percentage(scenario.stated_rate)}")
        st.markdown(f"**Effective rate:** {format_percentage(scenario.effective_rate)}")
        if scenario.life_years:
            st.markdown(f"**Life:** {scenario.life_years} years")
        if scenario.payment_frequency:
            st.markdown(f"**Payments:** {scenario.payment_frequency}")

    st.markdown(f"""
    <div class="info-box">
        <h4>📝 Task</h4>
        <p>{scenario.task}</p>
    </div>
    """, unsafe_allow_html=True)


def render_entry_form(session: DrillSession, scenario: Scenario):
    """Journal entry lines plus the action buttons."""
    st.markdown("### Journal Entry")

    with st.form(key=f"entry_{scenario.id}"):
        header = st.columns([3, 1, 1])
        header[0].markdown("**Account**")
        header[1].markdown("**Debit**")
        header[2].markdown("**Credit**")

        raw_lines = []
        # One row per line of the answer
        for index in range(len(scenario.solution)):
            cols = st.columns([3, 1, 1])
            account = cols[0].text_input(
                "Account",
                key=f"account_{scenario.id}_{index}",
                label_visibility="collapsed",
            )
            debit = cols[1].text_input(
                "Debit",
                key=f"debit_{scenario.id}_{index}",
                label_visibility="collapsed",
                placeholder="0.00",
            )
            credit = cols[2].text_input(
                "Credit",
                key=f"credit_{scenario.id}_{index}",
                label_visibility="collapsed",
                placeholder="0.00",
            )
            raw_lines.append({"account": account, "debit": debit, "credit": credit})

        checked = st.form_submit_button("✅ Check My Answer", type="primary")

    if checked:
        try:
            for line in raw_lines:
                CandidateLine.model_validate(line)
        except ValidationError:
            st.warning("Amounts must be positive numbers, e.g. 1250.00. Other values count as 0.")

        lines = [CandidateLine.from_form(line) for line in raw_lines]
        outcome = run_action(session, session.submit(lines))
        st.session_state.outcome = outcome
        st.session_state.feedback_shown_at = time.monotonic()

    col1, col2, col3 = st.columns(3)

    with col1:
        label = "🙈 Hide Solution" if st.session_state.show_solution else "👀 Show Solution"
        if st.button(label):
            st.session_state.show_solution = not st.session_state.show_solution
            st.rerun()

    with col2:
        if session.ready_to_advance:
            if st.button("➡️ Next Question", type="primary"):
                run_action(session, session.advance())
                clear_feedback()
                st.rerun()
        elif st.button("⏭️ Skip Question"):
            run_action(session, session.advance())
            clear_feedback()
            st.rerun()


def render_feedback():
    """Result of the last check, if any."""
    outcome = st.session_state.outcome
    if outcome is None:
        return

    if outcome.result.matches:
        st.markdown(f"""
        <div class="success-box">
            <h4>✅ {outcome.message}</h4>
            <p>{outcome.feedback}</p>
        </div>
        """, unsafe_allow_html=True)
        return

    st.markdown(f"""
    <div class="error-box">
        <h4>❌ {outcome.message}</h4>
    </div>
    """, unsafe_allow_html=True)

    # The encouragement disappears after a few seconds; the error stays
    shown_at = st.session_state.feedback_shown_at
    if shown_at is not None and time.monotonic() - shown_at < settings.drill.feedback_dismiss_seconds:
        st.caption(outcome.feedback)


def render_solution(scenario: Scenario):
    """Canonical journal entry and the supporting calculations."""
    st.markdown("### Solution")

    st.table([
        {
            "Account": line.account,
            "Debit": format_currency(line.debit) if line.debit is not None else "",
            "Credit": format_currency(line.credit) if line.credit is not None else "",
        }
        for line in scenario.solution
    ])

    if scenario.key_calculations:
        st.markdown("#### Key Calculations")
        if scenario.overview:
            st.markdown(scenario.overview)
        for label, value in scenario.calculation_items:
            st.markdown(f"**{format_calc_key(label)}:** {value}")


def render_finished_page(session: DrillSession):
    """Shown after advancing past the last scenario."""
    summary = session.summary

    st.markdown(f"""
    <div class="success-box">
        <h3>🎉 Congratulations! You have finished all the bond journal entries in this app!</h3>
        <p>You solved {summary.solved_count} of {summary.total_scenarios} scenarios.</p>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("Use **Reset** above to start again from the first scenario.")


if __name__ == "__main__":
    main()
