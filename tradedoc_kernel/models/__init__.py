"""ORM models for the trade documentation kernel."""

from tradedoc_kernel.models.bills import ManuBillModel, SupplyBillModel, TransBillModel
from tradedoc_kernel.models.documents import (
    ExportDocumentModel,
    PerformaInvoiceModel,
    PurchaseOrderModel,
)
from tradedoc_kernel.models.party import PartyModel
from tradedoc_kernel.models.reference import ProductModel, SizeModel
from tradedoc_kernel.models.transaction import TransactionModel

__all__ = [
    "SizeModel",
    "ProductModel",
    "PartyModel",
    "PerformaInvoiceModel",
    "PurchaseOrderModel",
    "ExportDocumentModel",
    "ManuBillModel",
    "SupplyBillModel",
    "TransBillModel",
    "TransactionModel",
]
