"""
Diamond-square terrain generation.
"""
