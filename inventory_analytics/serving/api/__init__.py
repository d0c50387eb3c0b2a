"""
API Module
"""
