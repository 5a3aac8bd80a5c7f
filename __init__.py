"""FinanceIQ transaction analytics engine.

Normalizes uploaded transaction records, classifies and totals them,
flags unusual amounts and runs the loan/savings/investment calculators.
See ``process_transactions.py`` and ``mcp_server.py`` for entry points.
"""
