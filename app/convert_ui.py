"""
convert_ui.py — Model Tools
---------------------------

Converts a Keras 3 `model.json` export into the TensorFlow.js Layers format
from the browser. The converted file can be downloaded, or written over the
served model when it came from the configured model directory.

Dependencies:
- Streamlit for UI
"""

import json

import streamlit as st

from config.settings import APP_MODE, MODEL_BACKUP_NAME, MODEL_JSON_PATH
from core.exception import ModelFormatError
from core.model_convert import convert_model_file, convert_topology
from tools.ui_tools import show_error, update_status

if APP_MODE.lower() == "demo":
    st.title("Demo")
    st.error("🔒 Not available in the demo.")
    st.stop()

st.write("Patch a Keras 3 `model.json` so TensorFlow.js can load it.")

# --- Served model ------------------------------------------------------------
st.subheader("1) Served model")
st.code(str(MODEL_JSON_PATH), language="bash")

if MODEL_JSON_PATH.exists():
    if st.button("Convert served model"):
        try:
            result, summary = convert_model_file(MODEL_JSON_PATH, MODEL_JSON_PATH.with_name(MODEL_BACKUP_NAME))
        except (FileNotFoundError, ModelFormatError) as e:
            show_error(e)
        else:
            update_status(f"Converted {result.converted_layers} of {result.total_layers} layers")
            st.success(f"Converted {result.converted_layers} of {result.total_layers} layers")
            with st.expander("Verification"):
                st.json(summary)
            st.cache_resource.clear()
else:
    st.info("No model.json in the model directory yet.")

# --- Upload a model.json -----------------------------------------------------
st.subheader("2) Convert an uploaded model.json")
uploaded = st.file_uploader("model.json", type=["json"])

if uploaded is not None:
    try:
        doc = json.loads(uploaded.getvalue().decode("utf-8"))
        result = convert_topology(doc)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        show_error(ModelFormatError(f"Invalid JSON: {e}"))
    except ModelFormatError as e:
        show_error(e)
    else:
        st.success(f"Converted {result.converted_layers} of {result.total_layers} layers")
        if result.changed:
            with st.expander("Changed layers"):
                st.write("\n".join(f"• {n}" for n in result.changed))
        st.download_button(
            "Download converted model.json",
            data=json.dumps(result.model, separators=(",", ":")),
            file_name="model.json",
            mime="application/json",
        )
