"""HR Portal package.

Feature modules (users, timetracking, leaves, payroll, invoices, notifications)
sit behind a thin Flask controller layer over service/repository layers.
"""
