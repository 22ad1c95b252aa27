"""Fit Engine — calibrate the step constants against labelled charts.

Sub-package containing:
    dataset    – labelled chart loading (simfiles and preset streams)
    evaluator  – rating error of a parameter set against chart levels
    trainer    – coordinate-descent and hill-climbing optimisers
"""
