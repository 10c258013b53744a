"""Shift Ledger package.

Shift & time accounting engine for multi-slot work positions: active shift
lifecycle, equipment arbitration, log aggregation, overtime alerting and
payroll. Organized by feature modules with a thin Flask controller layer on
top of pure engine functions and service/repository layers.
"""
