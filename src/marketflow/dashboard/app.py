"""Streamlit entry point: ``streamlit run marketflow/dashboard/app.py``."""

import streamlit as st

from marketflow.dashboard import render_workflow_builder

st.set_page_config(page_title="Marketflow", layout="wide")
render_workflow_builder()
