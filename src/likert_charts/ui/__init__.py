"""Streamlit page hosting the chart grid."""
