"""
Core data and charting layer.

This package contains:
- data_loader: fetch the survey response rows from the remote endpoint
- aggregator: per-question Likert frequency counts and plot series
- renderer: scales, bar geometry and matplotlib figures for one chart
- ui_adapter: container and page operations the pipeline can use
- pipeline: fetch -> aggregate -> render sequencing for a page load
"""
