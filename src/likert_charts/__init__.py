"""Likert-scale survey results rendered as a grid of per-question bar charts."""
