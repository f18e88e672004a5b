"""
Retur Service Package Initialization
"""
