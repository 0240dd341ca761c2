"""Participant System package.

Feature modules (attendance, blacklist, enrollments, notifications, ...) keep
their own model/repository/service layers behind a thin Flask controller.
"""
