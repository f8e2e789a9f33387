"""Leavedesk package.

Attendance and leave management organised by feature modules (profiles,
attendance, leaves, reports, ...) with a thin Flask controller layer over
service/repository layers.
"""
