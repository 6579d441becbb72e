# utils/exporter.py
"""Exportación a CSV de transacciones y suscripciones."""
import csv
import os

TRANSACTION_HEADER = ["Date", "Time", "Name", "Category", "Type", "Amount", "Notes", "Account"]
SUBSCRIPTION_HEADER = ["Name", "Amount", "Cycle", "Category", "Next Payment", "Status", "Monthly"]


def _money(value) -> str:
    return f"{float(value or 0):.2f}"


def export_transactions_csv(transactions, path) -> int:
    """Escribe las transacciones en `path`. Devuelve las filas escritas."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    rows = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(TRANSACTION_HEADER)
        for t in transactions:
            w.writerow([
                t.date.strftime("%Y-%m-%d"),
                t.date.strftime("%H:%M"),
                t.name,
                t.category or "",
                "Income" if t.is_income else "Expense",
                _money(t.amount),
                t.notes or "",
                t.account_name or "",
            ])
            rows += 1
    return rows


def export_subscriptions_csv(subscriptions, path) -> int:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    rows = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(SUBSCRIPTION_HEADER)
        for s in subscriptions:
            w.writerow([
                s.name,
                _money(s.amount),
                s.billing_cycle,
                s.category or "",
                s.next_payment_date.strftime("%Y-%m-%d"),
                "Active" if s.is_active else "Paused",
                _money(s.monthly_amount),
            ])
            rows += 1
    return rows
