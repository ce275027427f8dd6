"""Payroll Ledger package.

Attendance ledger, advance ledger and payroll settlement for small labour
crews, organized by feature modules (attendance, advances, payroll, reports,
workers, folders) behind a thin Flask JSON layer.
"""
