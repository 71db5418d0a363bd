"""
eschool_repository: async persistence layer for an online-school platform.

Users, schools, courses, reviews and certificates are stored through one
repository per entity, all sharing the same generated CRUD statements and the
same closed error taxonomy (`exceptions.ErrorKind`).
"""
