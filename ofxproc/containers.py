"""Containers accumulate the data elements of an open OFX aggregate.

Every aggregate opened in the document creates exactly one `Container`.
There is a single container class; its behaviour is selected by its
`ContainerKind`:

  - `UNRECOGNIZED`: an aggregate this module knows nothing about.  Its data
    elements are dropped.  Recognized aggregates nested inside it still get
    their own containers.

  - `PASSTHROUGH`: a structural wrapper such as <BANKTRANLIST> or <SECID>.
    Its data elements are handed to the enclosing container.

  - `STATUS`, `BALANCE`, `STATEMENT`, `ACCOUNT`, `TRANSACTION`, `SECURITY`:
    build the corresponding record from `ofxproc.records`.

Which data elements a container accepts, and how their text is converted, is
described by `FIELD_TABLES`.  Values inherited from enclosing containers are
copied once, when the container is created.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional
import enum

from . import status_codes
from .account_id import account_display_name, derive_account_id
from .conversion import (clean_text, enum_converter, parse_decimal, parse_int,
                         parse_ofx_time, truncate)
from .messages import Diagnostics
from .records import (AccountRecord, AccountType, BalanceRecord,
                      CorrectionAction, InvestmentTransactionType,
                      SecurityRecord, Severity, StatementRecord, StatusRecord,
                      TransactionRecord, TransactionType, make_record)
from .schema import ContainerKind, container_kind

FieldSpec = NamedTuple('FieldSpec', [
    ('field', str),
    ('convert', Optional[Callable[[str], Any]]),
    ('max_length', Optional[int]),
])


def _text(field: str, max_length: int) -> FieldSpec:
    return FieldSpec(field, None, max_length)


def _date(field: str) -> FieldSpec:
    return FieldSpec(field, parse_ofx_time, None)


def _amount(field: str) -> FieldSpec:
    return FieldSpec(field, parse_decimal, None)


def _enum(field: str, enum_type) -> FieldSpec:
    return FieldSpec(field, enum_converter(enum_type), None)


# Maximum lengths follow the OFX element definitions (A-32 etc.).
FIELD_TABLES = {
    ContainerKind.UNRECOGNIZED: {},
    ContainerKind.PASSTHROUGH: {},
    ContainerKind.STATUS: {
        'CODE': FieldSpec('code', parse_int, None),
        'SEVERITY': _enum('severity', Severity),
        'MESSAGE': _text('server_message', 255),
    },
    ContainerKind.BALANCE: {
        'BALAMT': _amount('amount'),
        'VALUE': _amount('amount'),
        'DTASOF': _date('date'),
        'NAME': _text('name', 32),
        'DESC': _text('description', 80),
    },
    ContainerKind.STATEMENT: {
        'CURDEF': _text('currency', 3),
        'DTSTART': _date('date_start'),
        'DTEND': _date('date_end'),
        'MKTGINFO': _text('marketing_info', 360),
    },
    ContainerKind.ACCOUNT: {
        'BANKID': _text('bank_id', 9),
        'BRANCHID': _text('branch_id', 22),
        'ACCTID': _text('account_number', 22),
        'ACCTKEY': _text('account_key', 22),
        'BROKERID': _text('broker_id', 22),
        'ACCTTYPE': _enum('account_type', AccountType),
    },
    ContainerKind.TRANSACTION: {
        'TRNTYPE': _enum('transaction_type', TransactionType),
        'DTUSER': _date('date_initiated'),
        'DTTRADE': _date('date_initiated'),
        'DTPOSTED': _date('date_posted'),
        'DTSETTLE': _date('date_posted'),
        'DTAVAIL': _date('date_funds_available'),
        'TRNAMT': _amount('amount'),
        'TOTAL': _amount('amount'),
        'UNITS': _amount('units'),
        'UNITPRICE': _amount('unitprice'),
        'FITID': _text('fi_id', 255),
        'CORRECTFITID': _text('fi_id_corrected', 255),
        'CORRECTACTION': _enum('fi_id_correction_action', CorrectionAction),
        'SRVRTID': _text('server_transaction_id', 36),
        'CHECKNUM': _text('check_number', 12),
        'REFNUM': _text('reference_number', 32),
        'SIC': _text('standard_industrial_code', 6),
        'PAYEEID': _text('payee_id', 12),
        'NAME': _text('name', 32),
        'MEMO': _text('memo', 255),
        'UNIQUEID': _text('unique_id', 32),
        'UNIQUEIDTYPE': _text('unique_id_type', 10),
    },
    ContainerKind.SECURITY: {
        'UNIQUEID': _text('unique_id', 32),
        'UNIQUEIDTYPE': _text('unique_id_type', 10),
        'SECNAME': _text('secname', 120),
        'TICKER': _text('ticker', 32),
        'UNITPRICE': _amount('unitprice'),
        'DTASOF': _date('date_unitprice'),
        'CURSYM': _text('currency', 3),
        'MEMO': _text('memo', 255),
    },
}  # type: Dict[ContainerKind, Dict[str, FieldSpec]]

_PRESET_ACCOUNT_TYPES = {
    'CCACCTFROM': AccountType.CREDITCARD,
    'INVACCTFROM': AccountType.INVESTMENT,
}


class Container(object):
    """The in-progress state of one open OFX aggregate."""

    def __init__(self, kind: ContainerKind, source_tag: str,
                 parent: Optional['Container'],
                 diagnostics: Diagnostics) -> None:
        self.kind = kind
        self.source_tag = source_tag
        self.parent = parent
        self.diagnostics = diagnostics
        self.values = {}  # type: Dict[str, Any]
        self.account = None  # type: Optional[AccountRecord]
        self.balances = []  # type: List[BalanceRecord]
        self.security = None  # type: Optional[SecurityRecord]
        self._inherit()

    def __repr__(self) -> str:
        return 'Container(%s, %r)' % (self.kind.name, self.source_tag)

    def nearest(self, kind: ContainerKind) -> Optional['Container']:
        """Returns the closest enclosing container of the given kind."""
        node = self.parent
        while node is not None:
            if node.kind == kind:
                return node
            node = node.parent
        return None

    def _inherit(self) -> None:
        kind = self.kind
        if kind == ContainerKind.STATUS:
            if self.parent is not None:
                self.values['ofx_element_name'] = self.parent.source_tag
        elif kind == ContainerKind.ACCOUNT:
            statement = self.nearest(ContainerKind.STATEMENT)
            if statement is not None and 'currency' in statement.values:
                self.values['currency'] = statement.values['currency']
            preset = _PRESET_ACCOUNT_TYPES.get(self.source_tag)
            if preset is not None:
                self.values['account_type'] = preset
        elif kind == ContainerKind.TRANSACTION:
            statement = self.nearest(ContainerKind.STATEMENT)
            if statement is not None and 'account_id' in statement.values:
                self.values['account_id'] = statement.values['account_id']
            if self.source_tag != 'STMTTRN':
                self.values['invtransaction_type'] = InvestmentTransactionType[
                    self.source_tag]

    def accept_field(self, tag: str, raw_text: str) -> None:
        """Maps the data element `tag` with text `raw_text` onto a field."""
        if self.kind == ContainerKind.PASSTHROUGH:
            if self.parent is None:
                self.diagnostics.debug(
                    'Ignoring <%s> outside of any known aggregate' % tag)
                return
            self.parent.accept_field(tag, raw_text)
            return
        if self.kind == ContainerKind.UNRECOGNIZED:
            self.diagnostics.parser(
                'Ignoring <%s> inside unsupported aggregate <%s>' %
                (tag, self.source_tag))
            return
        field_spec = FIELD_TABLES[self.kind].get(tag)
        if field_spec is None:
            self.diagnostics.debug('Ignoring unknown element <%s> in <%s>' %
                                   (tag, self.source_tag))
            return
        text = clean_text(raw_text)
        if field_spec.convert is None:
            value = truncate(text, field_spec.max_length)  # type: Any
            if len(value) != len(text):
                self.diagnostics.warning(
                    '<%s> in <%s> is longer than %d characters, truncated: %r'
                    % (tag, self.source_tag, field_spec.max_length, text))
        else:
            try:
                value = field_spec.convert(text)
            except ValueError as e:
                self.diagnostics.warning('Ignoring <%s> in <%s>: %s' %
                                         (tag, self.source_tag, e))
                return
            if isinstance(value, enum.Enum) and value.name == 'UNKNOWN' and (
                    text != 'UNKNOWN'):
                self.diagnostics.info('Unknown %s value %r in <%s>' %
                                      (field_spec.field, text, self.source_tag))
        self.values[field_spec.field] = value

    def add_balance(self, balance: BalanceRecord) -> None:
        """Merges a closed <LEDGERBAL>, <AVAILBAL> or <BALANCE> into a statement."""
        self.balances.append(balance)
        if balance.source_tag == 'LEDGERBAL':
            prefix = 'ledger_balance'
        elif balance.source_tag == 'AVAILBAL':
            prefix = 'available_balance'
        else:
            return
        if balance.amount_valid:
            self.values[prefix] = balance.amount
        if balance.date_valid:
            self.values[prefix + '_date'] = balance.date

    def add_account(self, account: AccountRecord) -> None:
        self.account = account
        if 'account_id' not in self.values and account.account_id_valid:
            self.values['account_id'] = account.account_id

    def embed_security(self, security: SecurityRecord) -> None:
        self.security = security

    def finalize(self) -> Any:
        """Builds the record for this container, or `None` for structural kinds."""
        finalizer = _FINALIZERS.get(self.kind)
        if finalizer is None:
            return None
        return finalizer(self)


def _finalize_status(container: Container) -> StatusRecord:
    values = dict(container.values)
    if 'code' in values:
        values['name'], values['description'] = status_codes.describe(
            values['code'])
    return make_record(StatusRecord, values)


def _finalize_balance(container: Container) -> BalanceRecord:
    values = dict(container.values)
    values['source_tag'] = container.source_tag
    return make_record(BalanceRecord, values)


def _finalize_statement(container: Container) -> StatementRecord:
    values = dict(container.values)
    if container.account is not None:
        values['account'] = container.account
    if container.balances:
        values['balances'] = tuple(container.balances)
    return make_record(StatementRecord, values)


def _finalize_account(container: Container) -> AccountRecord:
    values = dict(container.values)
    if 'account_id' not in values:
        account_id = derive_account_id(
            values.get('bank_id') or values.get('broker_id'),
            values.get('branch_id'),
            values.get('account_number'),
            values.get('account_key'))
        if account_id is not None:
            values['account_id'] = account_id
    name = account_display_name(
        values.get('account_type'), values.get('account_number'),
        values.get('broker_id'))
    if name is not None:
        values['account_name'] = name
    return make_record(AccountRecord, values)


def _finalize_transaction(container: Container) -> TransactionRecord:
    values = dict(container.values)
    if container.security is not None:
        values['security'] = container.security
    return make_record(TransactionRecord, values)


def _finalize_security(container: Container) -> SecurityRecord:
    return make_record(SecurityRecord, dict(container.values))


_FINALIZERS = {
    ContainerKind.STATUS: _finalize_status,
    ContainerKind.BALANCE: _finalize_balance,
    ContainerKind.STATEMENT: _finalize_statement,
    ContainerKind.ACCOUNT: _finalize_account,
    ContainerKind.TRANSACTION: _finalize_transaction,
    ContainerKind.SECURITY: _finalize_security,
}  # type: Dict[ContainerKind, Callable[[Container], Any]]


def make_container(tag: str, parent: Optional[Container],
                   diagnostics: Diagnostics,
                   kind: Optional[ContainerKind] = None) -> Container:
    """Creates the container for the aggregate `tag`.

    :param kind: Optional.  Overrides the kind looked up from `tag`.
    """
    if kind is None:
        kind = container_kind(tag)
    if kind == ContainerKind.UNRECOGNIZED:
        diagnostics.info('Created container to hold unsupported aggregate <%s>'
                         % tag)
    return Container(kind, tag, parent, diagnostics)
