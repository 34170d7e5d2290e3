"""
Unit tests for the SDR hub setup utility
"""
