"""Records delivered to the consumer.

Every record is an immutable `NamedTuple`.  Each data field is optional: a
field the document did not supply is `None`, and its name is absent from the
record's `valid` set.  Consumers should check the presence flag, either as
`record.amount_valid` or `record.is_valid('amount')`, before reading a
field, and must not treat an unset field as zero.

Enumerated fields always hold a member of their enumeration.  A value the
document supplied but that is not part of the OFX vocabulary is reported as
the `UNKNOWN` member, with the presence flag set.
"""

from typing import Any, Dict, FrozenSet, NamedTuple, Optional, Tuple, Type, TypeVar
import datetime
import enum

from beancount.core.number import Decimal


class Severity(enum.Enum):
    INFO = 'INFO'
    WARN = 'WARN'
    ERROR = 'ERROR'
    UNKNOWN = 'UNKNOWN'


class AccountType(enum.Enum):
    CHECKING = 'CHECKING'
    SAVINGS = 'SAVINGS'
    MONEYMRKT = 'MONEYMRKT'
    CREDITLINE = 'CREDITLINE'
    CMA = 'CMA'
    CREDITCARD = 'CREDITCARD'
    INVESTMENT = 'INVESTMENT'
    UNKNOWN = 'UNKNOWN'


class TransactionType(enum.Enum):
    CREDIT = 'CREDIT'
    DEBIT = 'DEBIT'
    INT = 'INT'
    DIV = 'DIV'
    FEE = 'FEE'
    SRVCHG = 'SRVCHG'
    DEP = 'DEP'
    ATM = 'ATM'
    POS = 'POS'
    XFER = 'XFER'
    CHECK = 'CHECK'
    PAYMENT = 'PAYMENT'
    CASH = 'CASH'
    DIRECTDEP = 'DIRECTDEP'
    DIRECTDEBIT = 'DIRECTDEBIT'
    REPEATPMT = 'REPEATPMT'
    OTHER = 'OTHER'
    UNKNOWN = 'UNKNOWN'


class InvestmentTransactionType(enum.Enum):
    BUYDEBT = 'BUYDEBT'
    BUYMF = 'BUYMF'
    BUYOPT = 'BUYOPT'
    BUYOTHER = 'BUYOTHER'
    BUYSTOCK = 'BUYSTOCK'
    CLOSUREOPT = 'CLOSUREOPT'
    INCOME = 'INCOME'
    INVEXPENSE = 'INVEXPENSE'
    JRNLFUND = 'JRNLFUND'
    JRNLSEC = 'JRNLSEC'
    MARGININTEREST = 'MARGININTEREST'
    REINVEST = 'REINVEST'
    RETOFCAP = 'RETOFCAP'
    SELLDEBT = 'SELLDEBT'
    SELLMF = 'SELLMF'
    SELLOPT = 'SELLOPT'
    SELLOTHER = 'SELLOTHER'
    SELLSTOCK = 'SELLSTOCK'
    SPLIT = 'SPLIT'
    TRANSFER = 'TRANSFER'
    UNKNOWN = 'UNKNOWN'


class CorrectionAction(enum.Enum):
    DELETE = 'DELETE'
    REPLACE = 'REPLACE'
    UNKNOWN = 'UNKNOWN'


class _Record(object):
    """Presence-flag accessors shared by all records."""

    __slots__ = ()

    def is_valid(self, field: str) -> bool:
        if field not in self._fields:  # type: ignore
            raise AttributeError('%s has no field %r' %
                                 (type(self).__name__, field))
        return field in self.valid  # type: ignore

    def __getattr__(self, name: str) -> Any:
        if name.endswith('_valid'):
            field = name[:-len('_valid')]
            if field in type(self)._fields:  # type: ignore
                return field in self.valid  # type: ignore
        raise AttributeError('%r object has no attribute %r' %
                             (type(self).__name__, name))

    def present(self) -> Dict[str, Any]:
        """Returns the supplied fields, in declaration order."""
        return {
            k: getattr(self, k)
            for k in self._fields  # type: ignore
            if k in self.valid  # type: ignore
        }


class StatusRecord(_Record, NamedTuple('StatusRecord', [
        ('ofx_element_name', Optional[str]),
        ('severity', Optional[Severity]),
        ('code', Optional[int]),
        ('name', Optional[str]),
        ('description', Optional[str]),
        ('server_message', Optional[str]),
        ('valid', FrozenSet[str]),
])):
    """Status of a request, from an OFX <STATUS> aggregate."""
    __slots__ = ()


class BalanceRecord(_Record, NamedTuple('BalanceRecord', [
        ('source_tag', Optional[str]),
        ('name', Optional[str]),
        ('description', Optional[str]),
        ('amount', Optional[Decimal]),
        ('date', Optional[datetime.datetime]),
        ('valid', FrozenSet[str]),
])):
    """A balance attached to a statement.

    `source_tag` distinguishes <LEDGERBAL> from <AVAILBAL> and generic
    <BALANCE> entries.
    """
    __slots__ = ()


class AccountRecord(_Record, NamedTuple('AccountRecord', [
        ('account_id', Optional[str]),
        ('account_name', Optional[str]),
        ('account_type', Optional[AccountType]),
        ('currency', Optional[str]),
        ('bank_id', Optional[str]),
        ('branch_id', Optional[str]),
        ('account_number', Optional[str]),
        ('account_key', Optional[str]),
        ('broker_id', Optional[str]),
        ('valid', FrozenSet[str]),
])):
    """A bank, credit card or investment account."""
    __slots__ = ()


class StatementRecord(_Record, NamedTuple('StatementRecord', [
        ('currency', Optional[str]),
        ('account_id', Optional[str]),
        ('date_start', Optional[datetime.datetime]),
        ('date_end', Optional[datetime.datetime]),
        ('ledger_balance', Optional[Decimal]),
        ('ledger_balance_date', Optional[datetime.datetime]),
        ('available_balance', Optional[Decimal]),
        ('available_balance_date', Optional[datetime.datetime]),
        ('marketing_info', Optional[str]),
        ('account', Optional[AccountRecord]),
        ('balances', Optional[Tuple[BalanceRecord, ...]]),
        ('valid', FrozenSet[str]),
])):
    """A bank, credit card or investment statement."""
    __slots__ = ()


class SecurityRecord(_Record, NamedTuple('SecurityRecord', [
        ('unique_id', Optional[str]),
        ('unique_id_type', Optional[str]),
        ('secname', Optional[str]),
        ('ticker', Optional[str]),
        ('unitprice', Optional[Decimal]),
        ('date_unitprice', Optional[datetime.datetime]),
        ('currency', Optional[str]),
        ('memo', Optional[str]),
        ('valid', FrozenSet[str]),
])):
    """A security from the security list."""
    __slots__ = ()


class TransactionRecord(_Record, NamedTuple('TransactionRecord', [
        ('account_id', Optional[str]),
        ('transaction_type', Optional[TransactionType]),
        ('invtransaction_type', Optional[InvestmentTransactionType]),
        ('amount', Optional[Decimal]),
        ('units', Optional[Decimal]),
        ('unitprice', Optional[Decimal]),
        ('date_initiated', Optional[datetime.datetime]),
        ('date_posted', Optional[datetime.datetime]),
        ('date_funds_available', Optional[datetime.datetime]),
        ('fi_id', Optional[str]),
        ('fi_id_corrected', Optional[str]),
        ('fi_id_correction_action', Optional[CorrectionAction]),
        ('server_transaction_id', Optional[str]),
        ('check_number', Optional[str]),
        ('reference_number', Optional[str]),
        ('standard_industrial_code', Optional[str]),
        ('payee_id', Optional[str]),
        ('name', Optional[str]),
        ('memo', Optional[str]),
        ('unique_id', Optional[str]),
        ('unique_id_type', Optional[str]),
        ('security', Optional[SecurityRecord]),
        ('valid', FrozenSet[str]),
])):
    """A banking or investment transaction.

    `security` is only set when the security list appears earlier in the
    document than the transaction.  Most institutions send `<SECLISTMSGSRSV1>`
    after the statement, in which case it is unset and the consumer has to
    match `unique_id` against the delivered `SecurityRecord`s itself.
    """
    __slots__ = ()


R = TypeVar('R', bound=_Record)


def make_record(record_type: Type[R], values: Dict[str, Any]) -> R:
    """Builds a record from the supplied `values`.

    Every key of `values` is considered present; all other fields are unset.
    """
    fields = record_type._fields  # type: ignore
    unknown = set(values) - set(fields)
    if unknown:
        raise TypeError('%s has no fields %s' %
                        (record_type.__name__, sorted(unknown)))
    kwargs = dict.fromkeys(fields)
    kwargs.update(values)
    kwargs['valid'] = frozenset(k for k in values if k != 'valid')
    return record_type(**kwargs)
