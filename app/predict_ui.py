# predict_ui.py — Streamlit UI for single-photo sign character prediction
# ---------------------------------------------------------------------------
# - Upload Photo tab: image MIME check, preview, prediction card
# - Take Photo tab: camera capture, only opened while the toggle is on

import time

import streamlit as st

from config.settings import MAX_UPLOAD_MB
from core.exception import CameraUnavailableError, SanketError
from tools.image_utils import check_media_type, check_upload_size, open_image
from tools.ui_tools import get_predictor, render_prediction, show_error, update_status


st.caption("Upload an image or capture a photo to detect the sign language character.")

predictor = get_predictor()


def classify(data: bytes, filename: str | None, content_type: str | None):
    """Validate, decode and predict; shows the result or a user-facing error."""
    try:
        check_media_type(content_type, filename, expected="image")
        check_upload_size(data, MAX_UPLOAD_MB)
        img = open_image(data)
    except SanketError as e:
        show_error(e)
        return

    with st.spinner("Our AI is detecting the sign language character..."):
        try:
            result = predictor.predict(img, filename=filename)
        except Exception as e:
            show_error(e)
            return

    update_status(f"Analysed {filename or 'photo'} — {predictor.status}")
    render_prediction(result, image=img, demo=result.mode == "demo")


tab_upload, tab_camera = st.tabs(["Upload Photo", "Take Photo"])

with tab_upload:
    uploaded = st.file_uploader(
        "Drop your image here",
        type=["jpg", "jpeg", "png", "gif"],
        help=f"Supported formats: JPG, PNG, GIF (Max {MAX_UPLOAD_MB}MB)",
    )
    if uploaded is not None:
        st.caption(f"File: {uploaded.name} • {uploaded.size / 1024:.2f} KB")
        classify(uploaded.getvalue(), uploaded.name, uploaded.type)

with tab_camera:
    camera_on = st.toggle("Start camera", value=False, key="camera_on")
    if camera_on:
        shot = st.camera_input("Show your hand sign to the camera")
        if shot is not None:
            name = f"capture_{int(time.time())}.jpg"
            classify(shot.getvalue(), name, shot.type or "image/jpeg")
        else:
            # The browser owns the permission prompt; a denial only shows up as no frame
            with st.expander("Camera not working?"):
                st.warning(CameraUnavailableError.user_message)
    else:
        st.caption("The camera is off. Turn it on to capture a photo.")
