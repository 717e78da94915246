"""College Portal package.

Feature modules (identifiers, attendance, analytics, marks, ...) keep the
pure computations apart from the MySQL repositories, with a thin Flask
controller layer on top.
"""
