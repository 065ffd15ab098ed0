"""
Filesystem, settings, filename codec and format validation helpers.
"""
