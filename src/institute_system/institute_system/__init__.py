"""Institute System package.

Feature modules (timetable, attendance, approvals, notifications, reports)
each carry a thin Flask controller layer on top of service/repository layers.
"""
