"""
Functions that read (and, for bikes, update) single entities. Each one is
scoped to a hotel id.
"""
