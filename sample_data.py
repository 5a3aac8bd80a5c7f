"""
sample_data.py

Built-in transaction batch used when the default CSV cannot be read. The
records are deliberately raw (the same shape an upload has) so they go
through the normal ingestion path. They cover both revenue and several
expense categories, one pending and one failed payment, and two large client
receipts that stand out from the rest.
"""

SAMPLE_TRANSACTIONS = [
    {"id": "1", "date": "2025-10-26", "description": "Client Payment - Acme Corp", "amount": 45000, "status": "completed"},
    {"id": "2", "date": "2025-10-26", "description": "Software Subscription", "amount": 299, "status": "completed"},
    {"id": "3", "date": "2025-10-25", "description": "Office Supplies", "amount": 1250, "status": "completed"},
    {"id": "4", "date": "2025-10-25", "description": "Marketing Campaign", "amount": 8500, "status": "completed"},
    {"id": "5", "date": "2025-10-24", "description": "Client Payment - TechStart", "amount": 125000, "status": "completed"},
    {"id": "6", "date": "2025-10-24", "description": "Payroll Processing", "amount": 82000, "status": "pending"},
    {"id": "7", "date": "2025-10-23", "description": "Cloud Services", "amount": 3200, "status": "completed"},
    {"id": "8", "date": "2025-10-23", "description": "Consulting Services", "amount": 15000, "status": "completed"},
    {"id": "9", "date": "2025-10-22", "description": "Equipment Purchase", "amount": 28500, "status": "completed"},
    {"id": "10", "date": "2025-10-22", "description": "Travel Expenses", "amount": 4200, "status": "failed"},
]
