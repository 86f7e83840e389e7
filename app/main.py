"""
Streamlit Frontend for SenseFlow

The banking screen: current balance, the last operation, deposit and
withdraw fields with their buttons, and voice input.

DESIGN PRINCIPLES:
1. One account per browser session, opened when the session starts
2. Every action shows its outcome, including declined ones
3. Every control carries a spoken-description help text
4. Nothing is kept once the session ends

Voice input takes the transcript of what was said. It goes through the
same recognizer flow a platform speech service would use.
"""

import asyncio

import streamlit as st

from senseflow.config import get_settings, validate_all_settings
from senseflow.models.account import LastOperation
from senseflow.orchestrator import BankingSession, VoiceInputFlow, create_app_components
from senseflow.services.speech import SpeechRecognitionError, TranscriptSpeechRecognizer


# Page configuration
st.set_page_config(
    page_title="SenseFlow",
    page_icon="🏦",
    layout="centered",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .balance {
        font-size: 2.5em;
        font-weight: bold;
        text-align: center;
        color: #2c3e50;
    }
    .last-operation {
        text-align: center;
        font-size: 1.2em;
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


def get_components():
    """Get or create this browser session's components."""
    if "session" not in st.session_state:
        session, trail, audit_logger = create_app_components()
        st.session_state.session = session
        st.session_state.trail = trail
        st.session_state.audit_logger = audit_logger
    return (
        st.session_state.session,
        st.session_state.trail,
        st.session_state.audit_logger,
    )


def show_result(result) -> None:
    """Show a command outcome as a toast."""
    if result is None:
        return
    icon = "✅" if result.succeeded else "⚠️"
    st.toast(result.message, icon=icon)


def show_error(session: BankingSession, action: str, error: Exception) -> None:
    """Audit a failed action and show it on the page."""
    session.report_error(action, error)
    st.error(f"{action.capitalize()} failed: {error}")


def main():
    """Main application entry point."""
    try:
        session, trail, audit_logger = get_components()
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        st.stop()

    st.sidebar.title("🏦 SenseFlow")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["💰 Account", "📜 Activity", "⚙️ Settings"],
        index=0,
    )
    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Say things like:**
        - "withdraw 50"
        - "deposit 100"
        """
    )

    if page == "💰 Account":
        render_account_page(session, audit_logger)
    elif page == "📜 Activity":
        render_activity_page(trail)
    elif page == "⚙️ Settings":
        render_settings_page(session)


def render_account_page(session: BankingSession, audit_logger):
    """Render the banking screen."""
    snapshot = session.snapshot()

    st.markdown(
        f'<div class="balance">Balance: ${snapshot.balance}</div>',
        unsafe_allow_html=True,
    )
    st.caption(
        f"Current balance is {snapshot.balance} dollars. "
        "This is the total amount of money available in your account."
    )
    st.markdown(
        f'<div class="last-operation">{session.last_message}</div>',
        unsafe_allow_html=True,
    )

    st.markdown("---")

    # Deposit
    with st.form("deposit_form", clear_on_submit=True):
        deposit_text = st.text_input(
            "Deposit amount",
            help=(
                "Enter deposit amount. This field allows you to input the "
                "amount of money you wish to deposit into your account."
            ),
        )
        if st.form_submit_button(
            "Deposit",
            help="Deposit button. Press this button to deposit the entered amount into your account.",
        ):
            try:
                show_result(session.deposit_from_input(deposit_text))
            except Exception as e:
                show_error(session, "deposit", e)
            else:
                st.rerun()

    # Withdraw
    with st.form("withdraw_form", clear_on_submit=True):
        withdraw_text = st.text_input(
            "Withdraw amount",
            help=(
                "Enter withdraw amount. This field allows you to input the "
                "amount of money you wish to withdraw from your account."
            ),
        )
        if st.form_submit_button(
            "Withdraw",
            help="Withdraw button. Press this button to withdraw the entered amount from your account.",
        ):
            try:
                show_result(session.withdraw_from_input(withdraw_text))
            except Exception as e:
                show_error(session, "withdrawal", e)
            else:
                st.rerun()

    st.markdown("---")

    # Voice input
    with st.form("voice_form", clear_on_submit=True):
        speech = get_settings().speech
        transcript = st.text_input(
            speech.prompt,
            placeholder='e.g., "withdraw 50"',
            help=(
                "Voice input. Say a command such as withdraw 50 or deposit 100 "
                "to move money without the amount fields."
            ),
        )
        if st.form_submit_button(
            "🎤 Voice Input",
            help="Voice input button. Press this button to start voice recognition for inputting commands.",
        ):
            flow = VoiceInputFlow(
                session=session,
                recognizer=TranscriptSpeechRecognizer(transcript),
                speech_settings=speech,
                audit_logger=audit_logger,
            )
            try:
                show_result(run_async(flow.listen()))
            except SpeechRecognitionError as e:
                # Already audited by the voice flow
                st.error(f"Voice input failed: {e}")
            except Exception as e:
                show_error(session, "voice input", e)
            else:
                st.rerun()

    if snapshot.last_operation == LastOperation.DEPOSIT_SUCCESSFUL_PAID_OFF:
        st.success("🎉 Your account is paid off.")


def render_activity_page(trail):
    """Render the session's recent activity."""
    st.title("📜 Recent Activity")
    st.markdown("Everything you did in this session, newest first.")

    events = trail.get_recent_events(limit=50)
    if not events:
        st.info("No activity yet.")
        return

    for event in events:
        with st.expander(f"{event.timestamp:%H:%M:%S} · {event.description}"):
            st.json(event.to_log_dict())


def render_settings_page(session: BankingSession):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name, key in [("Application", "app"), ("Speech", "speech")]:
        if status.get(key, False):
            st.success(f"✅ {name} settings loaded")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} settings - {error}")

    st.markdown("### Account")
    st.markdown(f"**Account type:** {session.account.kind.value.capitalize()}")

    st.markdown("---")
    st.markdown(
        "To configure the application, set `SENSEFLOW_*` and `SPEECH_*` "
        "environment variables or create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
