"""Attendance Ledger package.

This package is organized by feature modules (attendance, payroll, storage,
users, settings) with a thin Flask controller layer on top of plain
service/repository layers.
"""
