"""opsdesk package.

Organised by feature modules (attendance, leaves, payroll, tasks, wallet, ...)
with a thin Flask controller layer over service/repository layers.
"""
