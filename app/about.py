"""
about.py — Project Overview
---------------------------

Landing page for Sanket. Introduces the sign-language character demo and
lists the characters the model recognises.

Dependencies:
- Streamlit for UI rendering
"""

import streamlit as st

from core.labels import get_classes
from tools.ui_tools import get_predictor


st.title("Sanket — Sign Language Recognition")
st.write("")
st.write("Breaking communication barriers with AI-powered sign language recognition. "
         "Upload a photo of a hand sign, or take one with your camera, and Sanket will "
         "detect the sign language character it shows together with a confidence score.")
st.write("")

col1, col2, col3 = st.columns([1, 1, 1])
with col1:
    st.markdown("**Real-time prediction**")
    st.caption("Results in a few seconds, right in the browser.")
with col2:
    st.markdown("**36 Characters**")
    st.caption("Digits 0-9 and letters a-z.")
with col3:
    st.markdown("**Camera support**")
    st.caption("Capture a photo without leaving the page.")

classes = get_classes()
with st.expander(f"See recognised characters ({len(classes)})", expanded=False):
    left, right = st.columns(2)
    left.write(" ".join(c.upper() for c in classes[:10]))
    right.write(" ".join(c.upper() for c in classes[10:]))

predictor = get_predictor()
if predictor.is_demo:
    st.info("Running in demo mode: predictions are samples until a converted model is available.")

st.caption("© 2025 Sanket. All rights reserved.")
