"""
Calculation modules for the chart engine
"""
