"""
CLI command modules for viewtrail.
"""
