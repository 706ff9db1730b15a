"""
HTTP surface for compiling manifests.
"""
