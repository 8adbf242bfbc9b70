"""
Command-line interface for viewtrail.
"""
