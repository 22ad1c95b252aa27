"""Stamina Engine — fatigue-simulation difficulty rater for step charts.

Sub-package containing:
    note          – immutable note value, feet and the foot index mapping
    panel_layout  – column → panel position for ITG / Pump / 9-panel pads
    step_params   – the five tunable step-fatigue constants (YAML-backed)
    foot          – per-foot decay-plus-impulse fatigue recurrence
    state         – combined two-foot state transition
    search_graph  – arena DAG for the windowed beam search
    rate          – orchestrates the search and exports ratings / traces
    chart         – chart records and synthetic stream builders
    sm_parser     – ``.sm`` simfile loading and note extraction
"""
