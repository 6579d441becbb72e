# cofinance/store.py
"""
Almacén de registros: altas, lecturas, cambios y bajas de cuentas,
transacciones y suscripciones sobre la base local.

Toda escritura que termina bien hace commit y DESPUÉS avisa una sola vez
al ChangeNotifier. Los objetos devueltos están desligados de la sesión:
modificarlos no cambia nada en la base.
"""
from contextlib import contextmanager
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from cofinance import config
from cofinance.database import Database
from cofinance.errors import NotFoundError, PersistenceError, StoreInitializationError
from cofinance.log import ensure_logging
from cofinance.models import RECORD_KINDS, Account, Subscription, Transaction
from cofinance.notifier import ChangeNotifier
from cofinance.utils.billing import MONTHLY, next_payment_date
from cofinance.utils.dates import start_of_day

logger = structlog.get_logger(__name__)

# (columna, ascendente) por defecto para cada tipo
DEFAULT_ORDER = {
    Account: ("created_at", True),
    Transaction: ("date", False),
    Subscription: ("next_payment_date", True),
}

ACCOUNT_ORDERS = {
    "created": ("created_at", True),
    "balance": ("balance", False),
}

_MONEY_FIELDS = ("amount", "balance")
_DATE_FIELDS = ("date", "next_payment_date")

SUBSCRIPTION_CHARGE_NOTE = "Subscription charge"

# escala de las columnas Numeric(12, 2)
CENTS = Decimal("0.01")


def _to_money(field: str, value) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            raise ValueError(value)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"{field} no es un importe válido: {value!r}") from exc


def _to_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return start_of_day(value)
    raise ValueError(f"fecha no válida: {value!r}")


class RecordStore:
    def __init__(self, database: Database, notifier: ChangeNotifier | None = None,
                 link_balances: bool | None = None):
        self.db = database
        self.notifier = notifier or ChangeNotifier()
        if link_balances is None:
            link_balances = config.link_balances_enabled()
        self.link_balances = link_balances

    @classmethod
    def open(cls, url: str | None = None, echo: bool | None = None,
             notifier: ChangeNotifier | None = None, link_balances: bool | None = None):
        """
        Abre (o crea) la base local y su esquema. Si no se puede abrir lanza
        StoreInitializationError: el llamante debe abortar el arranque.
        """
        ensure_logging()
        database = Database()
        try:
            database.init_app(url, echo)
            database.create_all()
        except SQLAlchemyError as exc:
            logger.critical("store_open_failed", url=database.url or url, error=str(exc))
            database.close_all()
            raise StoreInitializationError(f"No se pudo abrir la base de datos: {exc}") from exc
        ok, error = database.check_connection()
        if not ok:
            logger.critical("store_open_failed", url=database.url, error=error)
            database.close_all()
            raise StoreInitializationError(f"No se pudo abrir la base de datos: {error}")
        logger.info("store_opened", url=database.url)
        return cls(database, notifier=notifier, link_balances=link_balances)

    def close(self):
        self.notifier.close()
        self.db.close_all()

    # ------------------------------------------------------------------
    # Sesiones
    # ------------------------------------------------------------------
    @contextmanager
    def _reading(self, what: str):
        session = self.db.session()
        try:
            yield session
        except SQLAlchemyError as exc:
            logger.error("store_read_failed", what=what, error=str(exc))
            raise PersistenceError(f"Error al leer {what}: {exc}") from exc
        finally:
            session.close()

    def _write(self, action: str, kind: str, work):
        """
        Ejecuta `work(session)` en una unidad de trabajo. Commit, y solo si
        el commit fue bien, un aviso al notifier.
        """
        session = self.db.session()
        try:
            result = work(session)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("store_write_failed", action=action, kind=kind, error=str(exc))
            raise PersistenceError(f"Error al guardar ({action} {kind}): {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        if result is None or result is False:
            # nada se escribió (p.ej. borrar algo que ya no existe)
            return result
        logger.debug("store_write", action=action, kind=kind)
        self.notifier.notify()
        return result

    # ------------------------------------------------------------------
    # Validación
    # ------------------------------------------------------------------
    @staticmethod
    def _clean_fields(kind, fields: dict) -> dict:
        unknown = set(fields) - set(kind.EDITABLE)
        if unknown:
            raise ValueError(f"Campos no válidos para {kind.__name__}: {', '.join(sorted(unknown))}")
        clean = dict(fields)
        for name in _MONEY_FIELDS:
            if name in clean:
                clean[name] = _to_money(name, clean[name])
        if kind in (Transaction, Subscription) and "amount" in clean and clean["amount"] < 0:
            raise ValueError("amount debe ser >= 0; el signo lo da is_income")
        for name in _DATE_FIELDS:
            if name in clean:
                if clean[name] is None:
                    raise ValueError(f"{name} no puede quedar vacío")
                clean[name] = _to_datetime(clean[name])
        if "interval_days" in clean and clean["interval_days"] is not None:
            clean["interval_days"] = int(clean["interval_days"])
        return clean

    @staticmethod
    def _check_kind(kind):
        if kind not in RECORD_KINDS:
            raise ValueError(f"Tipo de registro desconocido: {kind!r}")

    # ------------------------------------------------------------------
    # Saldos enlazados
    # ------------------------------------------------------------------
    def _apply_to_account(self, session, account_name: str, delta: Decimal):
        session.flush()
        account = session.scalars(
            select(Account).where(Account.name == account_name).order_by(Account.pk)
        ).first()
        if account is None:
            logger.warning("balance_account_not_found", account_name=account_name)
            return
        old = Decimal(account.balance or 0)
        account.balance = old + delta
        logger.debug("balance_updated", account_name=account_name, old=str(old), new=str(account.balance))

    # ------------------------------------------------------------------
    # CRUD genérico
    # ------------------------------------------------------------------
    def create(self, kind, fields: dict, link_balances: bool | None = None):
        """Alta de un registro. Asigna id y fecha de creación."""
        return self.create_many([(kind, fields)], link_balances=link_balances)[0]

    def create_many(self, items, link_balances: bool | None = None):
        """
        Varias altas en un único commit (un solo aviso).
        `items` es una secuencia de (tipo, campos).
        """
        if link_balances is None:
            link_balances = self.link_balances
        prepared = []
        for kind, fields in items:
            self._check_kind(kind)
            prepared.append((kind, self._clean_fields(kind, fields)))
        if not prepared:
            return []

        def work(session):
            records = []
            for kind, fields in prepared:
                record = kind(**fields)
                session.add(record)
                if kind is Transaction and link_balances:
                    self._apply_to_account(session, record.account_name, record.signed_amount)
                records.append(record)
            session.flush()
            return records

        kinds = ",".join(sorted({k.__name__ for k, _ in prepared}))
        records = self._write("create", kinds, work)
        for record in records:
            logger.info("record_created", kind=type(record).__name__, id=record.id)
        return records

    def fetch_all(self, kind, sort_key: str | None = None, ascending: bool | None = None,
                  predicate=None, include_inactive: bool = False):
        """
        Todos los registros de `kind` que cumplen `predicate` (expresión
        SQLAlchemy o lista de ellas), ordenados. Los empates se resuelven
        por orden de inserción.
        """
        self._check_kind(kind)
        default_key, default_asc = DEFAULT_ORDER[kind]
        if sort_key is None:
            sort_key = default_key
        if ascending is None:
            ascending = default_asc if sort_key == default_key else True
        if sort_key not in kind.__table__.columns:
            raise ValueError(f"{kind.__name__} no tiene la columna {sort_key!r}")

        column = getattr(kind, sort_key)
        stmt = select(kind)
        if predicate is not None:
            if isinstance(predicate, (list, tuple)):
                stmt = stmt.where(*predicate)
            else:
                stmt = stmt.where(predicate)
        if kind is Subscription and not include_inactive:
            stmt = stmt.where(Subscription.is_active.is_(True))
        stmt = stmt.order_by(column.asc() if ascending else column.desc(), kind.pk.asc())

        with self._reading(kind.__tablename__) as session:
            return list(session.scalars(stmt).all())

    def get(self, kind, record_id: str):
        self._check_kind(kind)
        with self._reading(kind.__tablename__) as session:
            record = session.scalars(select(kind).where(kind.id == record_id)).first()
        if record is None:
            raise NotFoundError(kind.__name__, record_id)
        return record

    def count(self, kind) -> int:
        self._check_kind(kind)
        with self._reading(kind.__tablename__) as session:
            return session.scalar(select(func.count()).select_from(kind)) or 0

    def update(self, kind, record_id: str, fields: dict):
        """Sobrescribe los campos indicados. NotFoundError si el id no existe."""
        self._check_kind(kind)
        clean = self._clean_fields(kind, fields)

        def work(session):
            record = session.scalars(select(kind).where(kind.id == record_id)).first()
            if record is None:
                raise NotFoundError(kind.__name__, record_id)
            if kind is Transaction and self.link_balances:
                # revertir el efecto anterior y aplicar el nuevo
                self._apply_to_account(session, record.account_name, -record.signed_amount)
            if kind is Account and "name" in clean and clean["name"] != record.name:
                logger.warning("account_renamed", old=record.name, new=clean["name"],
                               hint="las transacciones siguen apuntando al nombre anterior")
            for name, value in clean.items():
                setattr(record, name, value)
            if kind is Transaction and self.link_balances:
                self._apply_to_account(session, record.account_name, record.signed_amount)
            session.flush()
            return record

        record = self._write("update", kind.__name__, work)
        logger.info("record_updated", kind=kind.__name__, id=record_id, fields=sorted(clean))
        return record

    def delete(self, kind, record_id: str) -> bool:
        """Baja idempotente: si el registro ya no existe no hace nada."""
        self._check_kind(kind)

        def work(session):
            record = session.scalars(select(kind).where(kind.id == record_id)).first()
            if record is None:
                return False
            if kind is Transaction and self.link_balances:
                self._apply_to_account(session, record.account_name, -record.signed_amount)
            session.delete(record)
            return True

        deleted = self._write("delete", kind.__name__, work)
        if deleted:
            logger.info("record_deleted", kind=kind.__name__, id=record_id)
        return deleted

    # ------------------------------------------------------------------
    # Atajos por tipo
    # ------------------------------------------------------------------
    def add_account(self, name: str, type: str | None = "Bank", balance=0, color: str | None = "blue"):
        return self.create(Account, {"name": name, "type": type, "balance": balance, "color": color})

    def add_transaction(self, name: str, amount, is_income: bool = False, account_name: str = "",
                        category: str = "", date=None, notes: str | None = None):
        fields = {
            "name": name,
            "amount": amount,
            "is_income": is_income,
            "account_name": account_name,
            "category": category,
            "notes": notes,
        }
        if date is not None:
            fields["date"] = date
        return self.create(Transaction, fields)

    def add_subscription(self, name: str, amount, billing_cycle: str = MONTHLY, next_payment_date=None,
                         account_name: str = "", category: str = "", notes: str | None = None,
                         is_active: bool = True, interval_days: int = 30):
        fields = {
            "name": name,
            "amount": amount,
            "billing_cycle": billing_cycle,
            "interval_days": interval_days,
            "account_name": account_name,
            "category": category,
            "notes": notes,
            "is_active": is_active,
        }
        if next_payment_date is not None:
            fields["next_payment_date"] = next_payment_date
        return self.create(Subscription, fields)

    def fetch_accounts(self, order: str = "created"):
        try:
            sort_key, ascending = ACCOUNT_ORDERS[order]
        except KeyError:
            raise ValueError(f"Orden de cuentas desconocido: {order!r}") from None
        return self.fetch_all(Account, sort_key, ascending)

    def fetch_transactions(self, account_name: str | None = None):
        predicate = Transaction.account_name == account_name if account_name else None
        return self.fetch_all(Transaction, predicate=predicate)

    def fetch_subscriptions(self, include_inactive: bool = False):
        return self.fetch_all(Subscription, include_inactive=include_inactive)

    # ------------------------------------------------------------------
    # Operaciones compuestas
    # ------------------------------------------------------------------
    def recalculate_all_balances(self) -> dict:
        """
        Recalcula el saldo de cada cuenta como la suma de sus transacciones.
        Devuelve {nombre: saldo}.
        """
        def work(session):
            totals = {}
            accounts = session.scalars(select(Account).order_by(Account.pk)).all()
            for account in accounts:
                transactions = session.scalars(
                    select(Transaction).where(Transaction.account_name == account.name)
                ).all()
                calculated = sum((t.signed_amount for t in transactions), Decimal("0"))
                logger.debug("balance_recalculated", account_name=account.name,
                             old=str(account.balance), new=str(calculated))
                account.balance = calculated
                totals[account.name] = calculated
            return totals

        totals = self._write("recalculate", "Account", work)
        logger.info("balances_recalculated", accounts=len(totals or {}))
        return totals or {}

    def charge_subscription(self, subscription_id: str, on: datetime | None = None):
        """
        Registra el cobro de una suscripción: crea la transacción de gasto y
        avanza la próxima fecha de pago un ciclo. Un único commit.
        """
        charged_at = _to_datetime(on) if on is not None else datetime.now()

        def work(session):
            sub = session.scalars(select(Subscription).where(Subscription.id == subscription_id)).first()
            if sub is None:
                raise NotFoundError(Subscription.__name__, subscription_id)
            transaction = Transaction(
                name=sub.name or "Subscription",
                amount=Decimal(sub.amount),
                is_income=False,
                account_name=sub.account_name or "",
                category=sub.category or "Services",
                date=charged_at,
                notes=SUBSCRIPTION_CHARGE_NOTE,
            )
            session.add(transaction)
            if self.link_balances:
                self._apply_to_account(session, transaction.account_name, transaction.signed_amount)
            sub.next_payment_date = next_payment_date(sub.next_payment_date, sub.billing_cycle, sub.interval_days)
            session.flush()
            return transaction

        transaction = self._write("charge", "Subscription", work)
        logger.info("subscription_charged", id=subscription_id, transaction_id=transaction.id)
        return transaction
