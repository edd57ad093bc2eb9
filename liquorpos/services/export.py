import csv
import io
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from liquorpos.schemas.sales import SaleOut
from liquorpos.schemas.store import StoreSettingsOut

RECEIPT_WIDTH = 40


def _json_default(value: Any):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Unserializable value: {value!r}")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=_json_default).replace(",", ";")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def records_to_csv(records: Iterable[dict]) -> str:
    """Header from the first record's keys; nested values flattened with ';'."""
    rows = list(records)
    if not rows:
        return ""
    headers = list(rows[0].keys())
    sio = io.StringIO()
    writer = csv.writer(sio, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(header)) for header in headers])
    return sio.getvalue()


def _pair(left: str, right: str) -> str:
    gap = max(1, RECEIPT_WIDTH - len(left) - len(right))
    return f"{left}{' ' * gap}{right}"


def _amount(value: Decimal) -> str:
    return f"{value:,.2f}"


def render_receipt(sale: SaleOut, store: StoreSettingsOut) -> str:
    rule = "-" * RECEIPT_WIDTH
    lines = [
        store.shop_name.upper().center(RECEIPT_WIDTH),
        store.address_line1.center(RECEIPT_WIDTH),
        store.address_line2.center(RECEIPT_WIDTH),
        f"Tel: {store.phone}".center(RECEIPT_WIDTH),
        f"TIN: {store.tin_number}".center(RECEIPT_WIDTH),
        rule,
        _pair("Date:", sale.sold_at.strftime("%Y-%m-%d %H:%M")),
        _pair("Receipt #:", sale.id[-6:]),
        _pair("Cashier:", sale.cashier_name.split(" ")[0]),
        rule,
    ]
    for item in sale.items:
        lines.append(item.name[:RECEIPT_WIDTH])
        lines.append(_pair(f"  {item.quantity} x {_amount(item.price)}", _amount(item.total)))
    lines.extend(
        [
            rule,
            _pair("Subtotal:", _amount(sale.subtotal)),
            _pair(f"VAT ({store.tax_rate.normalize():f}%):", _amount(sale.tax)),
            _pair("TOTAL:", f"MWK {_amount(sale.total)}"),
            _pair("Paid via:", sale.payment_method.value.upper()),
            rule,
            "*** Thank You ***".center(RECEIPT_WIDTH),
            (store.receipt_footer or "No Returns on Alcohol").center(RECEIPT_WIDTH),
            sale.id.center(RECEIPT_WIDTH),
        ]
    )
    return "\n".join(line.rstrip() for line in lines) + "\n"
