"""
video_ui.py — Sign Language Video to Audio
-------------------------------------------

Upload a sign-language clip and receive an English transcription with an
audio track. Conversion runs through `core.upload.process_upload`, the same
code that backs `POST /api/upload`.

Dependencies:
- Streamlit for UI
"""

import streamlit as st

from config.settings import AUDIO_DIR, MAX_UPLOAD_MB
from core.exception import SanketError
from core.upload import process_upload
from tools.ui_tools import show_error, update_status


st.write("Drop your video file below and Sanket will convert the sign language into English audio.")

clip = st.file_uploader(
    "Upload your sign language video",
    type=["mp4", "mov", "webm", "avi", "mkv"],
    help=f"Max {MAX_UPLOAD_MB}MB",
)

if clip is not None:
    st.video(clip)
    try:
        with st.spinner("Processing your video..."):
            result = process_upload(clip.name, clip.type, clip.getvalue())
    except SanketError as e:
        show_error(e)
        st.stop()

    update_status(result.message)
    st.success(result.message)

    st.markdown("### Transcription")
    st.write(result.transcription)
    c1, c2 = st.columns(2)
    c1.metric("Confidence", f"{result.confidence * 100:.0f}%")
    c2.metric("Processing time", result.processingTime)

    audio_file = AUDIO_DIR / result.audioUrl.rsplit("/", 1)[-1]
    if audio_file.exists():
        st.audio(str(audio_file), format="audio/mp3")
    else:
        st.caption(f"Sample audio not found at {audio_file}")
