"""
Market Chart dashboard package
"""
