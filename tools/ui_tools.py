"""
ui_tools.py — Shared Streamlit UI Utilities
---------------------------------------------

Provides reusable pieces for the Sanket pages:

* The process-wide predictor (`get_predictor`) cached with `st.cache_resource`
* A status line kept in `st.session_state`
* Result card for a sign prediction
* Uniform error display for known and unexpected failures

Dependencies:
- Streamlit
"""

import streamlit as st

from core.exception import user_message_for


@st.cache_resource(show_spinner=False)
def get_predictor():
    """One predictor per server process, shared by all sessions."""
    from core.predictor import SignPredictor
    return SignPredictor()


def update_status(message: str, limit: int = 15):
    """
    Appends a message to the persistent status log and shows the latest one.

    Args:
        message (str): Status message to add
        limit (int): Maximum number of messages kept in the log (default 15)
    """
    if "status_log" not in st.session_state:
        st.session_state.status_log = []

    st.session_state.status_log.append(message)
    st.session_state.status_log = st.session_state.status_log[-limit:]
    st.caption(message)


def show_error(exc: BaseException):
    """Show the user-facing message for an exception."""
    st.error(user_message_for(exc))


def render_prediction(prediction, image=None, demo: bool = False):
    """
    Result card: predicted character, confidence and the analysed image.
    """
    st.markdown("### Prediction")
    m1, m2 = st.columns(2)
    m1.metric("Character", prediction.prediction.upper())
    m2.metric("Confidence", f"{prediction.confidence * 100:.1f}%")
    st.progress(min(max(prediction.confidence, 0.0), 1.0))

    if demo or prediction.mode == "demo":
        st.info("Demo mode: this is a sample prediction. Convert your model to get real results.")

    if image is not None:
        st.image(image, caption=prediction.filename or "Analysed image", width=320)

    share = f'Sign Language Detection: "{prediction.prediction.upper()}" with {prediction.confidence * 100:.1f}% confidence'
    with st.expander("Share result"):
        st.code(share, language=None)
