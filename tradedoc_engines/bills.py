"""
Bill totals - manufacturer, supply and transporter invoices.

Pure functions with no I/O.  Amounts are exact Decimals; rounding is the
bill's explicit ``round_off`` line, entered by the user.

Goods bills (manufacturer, supply):
    taxable       = quantity * rate * (1 - discount% / 100)   per line
    sub_total     = sum of taxable
    final         = sub_total - discount + insurance + freight
    central tax   = final * central rate / 100
    state tax     = final * state rate / 100
    grand_total   = final + central tax + state tax + round_off

Transporter bills:
    amount        = quantity * rate                            per line
    sub_total     = sum of amount
    cgst / sgst   = sub_total * rate / 100
    total_tax     = cgst + sgst
    total_payable = sub_total + total_tax + round_off
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal

from tradedoc_kernel.domain.entities import (
    GoodsBillItem,
    ManuBill,
    SupplyBill,
    TransBill,
    TransBillItem,
)
from tradedoc_kernel.domain.values import HUNDRED, ZERO, coerce_decimal

DEFAULT_CENTRAL_TAX_RATE = Decimal("9")
DEFAULT_STATE_TAX_RATE = Decimal("9")


@dataclass(frozen=True)
class GoodsBillTotals:
    line_taxable_amounts: tuple[Decimal, ...]
    sub_total: Decimal
    final_sub_total: Decimal
    central_tax_amount: Decimal
    state_tax_amount: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class TransportBillTotals:
    line_amounts: tuple[Decimal, ...]
    sub_total: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    total_tax: Decimal
    total_after_tax: Decimal
    total_payable: Decimal


def taxable_amount(quantity: Decimal, rate: Decimal, discount_percentage: Decimal = ZERO) -> Decimal:
    """Line value after its percentage discount."""
    quantity = coerce_decimal(quantity)
    rate = coerce_decimal(rate)
    discount_percentage = coerce_decimal(discount_percentage)
    return quantity * rate * (1 - discount_percentage / HUNDRED)


def compute_goods_bill_totals(
    items: Iterable[GoodsBillItem],
    central_tax_rate: Decimal = DEFAULT_CENTRAL_TAX_RATE,
    state_tax_rate: Decimal = DEFAULT_STATE_TAX_RATE,
    discount: Decimal = ZERO,
    insurance: Decimal = ZERO,
    freight: Decimal = ZERO,
    round_off: Decimal = ZERO,
) -> GoodsBillTotals:
    """Totals of a manufacturer or supply bill."""
    line_amounts = tuple(
        taxable_amount(i.quantity, i.rate, i.discount_percentage) for i in items
    )
    sub_total = sum(line_amounts, ZERO)
    final = (
        sub_total
        - coerce_decimal(discount)
        + coerce_decimal(insurance)
        + coerce_decimal(freight)
    )
    central = final * coerce_decimal(central_tax_rate) / HUNDRED
    state = final * coerce_decimal(state_tax_rate) / HUNDRED
    return GoodsBillTotals(
        line_taxable_amounts=line_amounts,
        sub_total=sub_total,
        final_sub_total=final,
        central_tax_amount=central,
        state_tax_amount=state,
        grand_total=final + central + state + coerce_decimal(round_off),
    )


def compute_transport_bill_totals(
    items: Iterable[TransBillItem],
    cgst_rate: Decimal = DEFAULT_CENTRAL_TAX_RATE,
    sgst_rate: Decimal = DEFAULT_STATE_TAX_RATE,
    round_off: Decimal = ZERO,
) -> TransportBillTotals:
    """Totals of a transporter bill."""
    line_amounts = tuple(i.quantity * i.rate for i in items)
    sub_total = sum(line_amounts, ZERO)
    cgst = sub_total * coerce_decimal(cgst_rate) / HUNDRED
    sgst = sub_total * coerce_decimal(sgst_rate) / HUNDRED
    total_tax = cgst + sgst
    total_after_tax = sub_total + total_tax
    return TransportBillTotals(
        line_amounts=line_amounts,
        sub_total=sub_total,
        cgst_amount=cgst,
        sgst_amount=sgst,
        total_tax=total_tax,
        total_after_tax=total_after_tax,
        total_payable=total_after_tax + coerce_decimal(round_off),
    )


def with_computed_totals(bill: ManuBill | SupplyBill | TransBill) -> ManuBill | SupplyBill | TransBill:
    """Return ``bill`` with every derived amount recomputed from its lines and rates."""
    if isinstance(bill, TransBill):
        totals = compute_transport_bill_totals(
            bill.items, bill.cgst_rate, bill.sgst_rate, bill.round_off,
        )
        return replace(
            bill,
            items=tuple(
                replace(item, amount=amount)
                for item, amount in zip(bill.items, totals.line_amounts)
            ),
            sub_total=totals.sub_total,
            cgst_amount=totals.cgst_amount,
            sgst_amount=totals.sgst_amount,
            total_tax=totals.total_tax,
            total_after_tax=totals.total_after_tax,
            total_payable=totals.total_payable,
        )

    totals = compute_goods_bill_totals(
        bill.items,
        bill.central_tax_rate,
        bill.state_tax_rate,
        bill.discount_amount,
        bill.insurance_amount,
        bill.freight_amount,
        bill.round_off,
    )
    return replace(
        bill,
        items=tuple(
            replace(item, taxable_amount=amount)
            for item, amount in zip(bill.items, totals.line_taxable_amounts)
        ),
        sub_total=totals.sub_total,
        final_sub_total=totals.final_sub_total,
        central_tax_amount=totals.central_tax_amount,
        state_tax_amount=totals.state_tax_amount,
        grand_total=totals.grand_total,
    )
