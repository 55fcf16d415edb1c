"""
Trade Documentation Kernel

Domain records, numeric coercion, structured logging, typed errors and the
entity store for an export business:
- Reference data (sizes, products) and parties
- Performa invoices, purchase orders, export documents
- Manufacturer, transporter and supply bills
- Payments made and received
"""

__version__ = "0.1.0"
