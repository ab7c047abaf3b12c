"""Fingerprint Attendance package.

Derives daily attendance facts (hours, lateness, deductions, leave states)
from time-clock punches and leave declarations. Organized by feature modules
(attendance, ledgers, employees, payroll, ...) with a thin Flask controller
layer over service/repository layers.
"""
