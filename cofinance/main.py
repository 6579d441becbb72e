# cofinance/main.py
"""Línea de comandos para consultar y modificar el almacén local."""
import argparse
import sys
from datetime import datetime

from cofinance import config
from cofinance.errors import StoreError, StoreInitializationError
from cofinance.log import configure_logging
from cofinance.models import Account, Subscription, Transaction
from cofinance.seed import seed_sample_data
from cofinance.store import RecordStore
from cofinance.utils.billing import BILLING_CYCLES, MONTHLY
from cofinance.utils.exporter import export_subscriptions_csv, export_transactions_csv
from cofinance.viewmodels import AccountViewModel, HomeViewModel, SubscriptionViewModel, TransactionViewModel
from cofinance.viewmodels.transaction import ALL_ACCOUNTS

KINDS = {
    "account": Account,
    "transaction": Transaction,
    "subscription": Subscription,
}


def to_date(s):
    return datetime.strptime(s, "%Y-%m-%d")


def money(value) -> str:
    return f"{float(value or 0):,.2f}"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cofinance", description="Cuentas, transacciones y suscripciones en local.")
    p.add_argument("--database", help="URL de la base (por defecto DATABASE_URL o sqlite:///cofinance.db)")
    p.add_argument("--link-balances", action="store_true", default=None,
                   help="Las transacciones actualizan el saldo de su cuenta")
    p.add_argument("-v", "--verbose", action="store_true", help="Log en nivel DEBUG")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Crea el esquema si no existe")
    sub.add_parser("seed", help="Inserta datos de ejemplo si la base está vacía")

    c = sub.add_parser("accounts", help="Lista las cuentas")
    c.add_argument("--by-balance", action="store_true", help="Ordenar por saldo descendente")

    c = sub.add_parser("transactions", help="Lista las transacciones")
    c.add_argument("--account", default=ALL_ACCOUNTS)
    c.add_argument("--search", default="")
    c.add_argument("--by-month", action="store_true", help="Agrupar por mes")

    sub.add_parser("subscriptions", help="Lista las suscripciones activas")
    sub.add_parser("summary", help="Resumen de inicio")

    c = sub.add_parser("add-account")
    c.add_argument("name")
    c.add_argument("--type", default="Bank")
    c.add_argument("--balance", default="0")
    c.add_argument("--color", default="blue")

    c = sub.add_parser("update-account")
    c.add_argument("id")
    c.add_argument("--name")
    c.add_argument("--type")
    c.add_argument("--balance")
    c.add_argument("--color")

    c = sub.add_parser("add-transaction")
    c.add_argument("name")
    c.add_argument("amount")
    c.add_argument("--income", action="store_true")
    c.add_argument("--account", default="")
    c.add_argument("--category", default="")
    c.add_argument("--date", type=to_date, help="YYYY-MM-DD (por defecto ahora)")
    c.add_argument("--notes")

    c = sub.add_parser("add-subscription")
    c.add_argument("name")
    c.add_argument("amount")
    c.add_argument("--cycle", default=MONTHLY, choices=BILLING_CYCLES)
    c.add_argument("--interval-days", type=int, default=30)
    c.add_argument("--next", type=to_date, dest="next_payment_date", help="YYYY-MM-DD")
    c.add_argument("--account", default="")
    c.add_argument("--category", default="")
    c.add_argument("--notes")
    c.add_argument("--inactive", action="store_true")

    c = sub.add_parser("delete")
    c.add_argument("kind", choices=sorted(KINDS))
    c.add_argument("id")

    c = sub.add_parser("charge", help="Registra el cobro de una suscripción")
    c.add_argument("id")

    sub.add_parser("recalculate", help="Recalcula los saldos desde las transacciones")

    c = sub.add_parser("export")
    c.add_argument("what", choices=["transactions", "subscriptions"])
    c.add_argument("path")

    c = sub.add_parser("config", help="Guarda una clave en el .env")
    c.add_argument("action", choices=["set"])
    c.add_argument("key")
    c.add_argument("value")
    c.add_argument("--env-file")
    return p


def print_accounts(vm: AccountViewModel):
    print(f"{'Nombre':<22}{'Tipo':<12}{'Saldo':>14}  Id")
    for a in vm.accounts:
        print(f"{a.name:<22}{a.type_key:<12}{money(a.balance):>14}  {a.id}")
    print("-" * 60)
    for tipo, saldo in sorted(vm.balance_by_type.items()):
        print(f"  {tipo:<32}{money(saldo):>14}")
    print(f"{'Total':<34}{money(vm.total_balance):>14}")


def print_transactions(rows):
    for t in rows:
        signo = "+" if t.is_income else "-"
        print(f"{config.date_to_string(t.date):<12}{t.name:<24}{t.account_name:<18}{signo}{money(t.amount):>12}  {t.id}")


def cmd_transactions(store, args):
    with TransactionViewModel(store) as vm:
        rows = vm.search(args.search, args.account)
        if args.by_month:
            for label, items in vm.grouped_by_month(args.account):
                items = [t for t in items if t in rows]
                if items:
                    print(f"== {label} ({len(items)})")
                    print_transactions(items)
        else:
            print_transactions(rows)
        print(f"Ingresos: {money(sum(t.amount for t in rows if t.is_income))}  "
              f"Gastos: {money(sum(t.amount for t in rows if not t.is_income))}")
    return 0


def cmd_subscriptions(store, args):
    with SubscriptionViewModel(store) as vm:
        for s in vm.subscriptions:
            print(f"{config.date_to_string(s.next_payment_date):<12}{s.name:<24}{s.billing_cycle:<9}"
                  f"{money(s.amount):>10}  {s.id}")
        print(f"Mensual: {money(vm.monthly_total)}  Anual: {money(vm.yearly_total)}")
    return 0


def cmd_summary(store, args):
    with HomeViewModel(store) as vm:
        print(f"Saldo total: {money(vm.total_balance)}")
        print(f"Transacciones este mes: {vm.transactions_this_month}")
        print(f"Ingresos del mes: {money(vm.income_this_month)}  Gastos del mes: {money(vm.expenses_this_month)}")
        if vm.recent_transactions:
            print("Recientes:")
            print_transactions(vm.recent_transactions)
    return 0


def run(store, args) -> int:
    cmd = args.command
    if cmd == "init":
        print(f"Base lista: {store.db.url}")
    elif cmd == "seed":
        print("Datos de ejemplo creados" if seed_sample_data(store) else "La base ya tiene datos, no se siembra")
    elif cmd == "accounts":
        with AccountViewModel(store, order="balance" if args.by_balance else "created") as vm:
            print_accounts(vm)
    elif cmd == "transactions":
        return cmd_transactions(store, args)
    elif cmd == "subscriptions":
        return cmd_subscriptions(store, args)
    elif cmd == "summary":
        return cmd_summary(store, args)
    elif cmd == "add-account":
        a = store.add_account(args.name, type=args.type, balance=args.balance, color=args.color)
        print(a.id)
    elif cmd == "update-account":
        fields = {k: getattr(args, k) for k in Account.EDITABLE if getattr(args, k) is not None}
        if not fields:
            print("Nada que actualizar", file=sys.stderr)
            return 1
        store.update(Account, args.id, fields)
    elif cmd == "add-transaction":
        t = store.add_transaction(args.name, args.amount, is_income=args.income, account_name=args.account,
                                  category=args.category, date=args.date, notes=args.notes)
        print(t.id)
    elif cmd == "add-subscription":
        s = store.add_subscription(args.name, args.amount, billing_cycle=args.cycle,
                                   next_payment_date=args.next_payment_date, account_name=args.account,
                                   category=args.category, notes=args.notes, is_active=not args.inactive,
                                   interval_days=args.interval_days)
        print(s.id)
    elif cmd == "delete":
        if not store.delete(KINDS[args.kind], args.id):
            print(f"{args.kind} {args.id} no existe", file=sys.stderr)
    elif cmd == "charge":
        t = store.charge_subscription(args.id)
        print(t.id)
    elif cmd == "recalculate":
        for name, balance in store.recalculate_all_balances().items():
            print(f"{name:<22}{money(balance):>14}")
    elif cmd == "export":
        if args.what == "transactions":
            n = export_transactions_csv(store.fetch_transactions(), args.path)
        else:
            n = export_subscriptions_csv(store.fetch_subscriptions(include_inactive=True), args.path)
        print(f"{n} filas exportadas a {args.path}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    if args.command == "config":
        path = config.save_setting(args.key, args.value, args.env_file)
        print(f"{args.key} guardado en {path}")
        return 0

    try:
        store = RecordStore.open(args.database, link_balances=args.link_balances)
    except StoreInitializationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        return run(store, args)
    except (StoreError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
