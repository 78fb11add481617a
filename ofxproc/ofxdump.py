"""Prints the records contained in OFX files.

    ofxdump statement.ofx

Each record is printed as a block of `label: value` lines, in the order in
which the parser delivers them.  Only the fields present in the document are
printed.  Parser diagnostics are written through `logging` (to stderr, or to
the file given by `--log-output`).

The exit status is 0 if every file parsed successfully, 1 otherwise.
"""

from typing import Any, List, Optional, Sequence
import argparse
import datetime
import enum
import importlib.metadata
import logging
import sys

from . import messages
from .parser import Callbacks, ParseOptions, parse_file
from .records import (AccountRecord, SecurityRecord, StatementRecord,
                      StatusRecord, TransactionRecord)

STATUS_LABELS = [
    ('ofx_element_name', 'Ofx entity this status is relevant to'),
    ('severity', 'Severity'),
    ('code', 'Code'),
    ('name', 'Name'),
    ('description', 'Description'),
    ('server_message', 'Server message'),
]

ACCOUNT_LABELS = [
    ('account_id', 'Account ID'),
    ('account_name', 'Account name'),
    ('account_type', 'Account type'),
    ('currency', 'Currency'),
    ('bank_id', 'Bank ID'),
    ('branch_id', 'Branch ID'),
    ('broker_id', 'Broker ID'),
    ('account_number', 'Account number'),
    ('account_key', 'Account key'),
]

STATEMENT_LABELS = [
    ('currency', 'Currency'),
    ('account_id', 'Account ID'),
    ('date_start', 'Start date of this statement'),
    ('date_end', 'End date of this statement'),
    ('ledger_balance', 'Ledger balance'),
    ('ledger_balance_date', 'Ledger balance date'),
    ('available_balance', 'Available balance'),
    ('available_balance_date', 'Available balance date'),
    ('marketing_info', 'Marketing information'),
]

SECURITY_LABELS = [
    ('unique_id', 'Unique ID of the security'),
    ('unique_id_type', 'Format of the unique ID'),
    ('secname', 'Name of the security'),
    ('ticker', 'Ticker symbol'),
    ('unitprice', 'Price of each unit of the security'),
    ('date_unitprice', 'Date as of which the unit price is valid'),
    ('currency', 'Currency of the unit price'),
    ('memo', 'Extra information (memo)'),
]

TRANSACTION_LABELS = [
    ('account_id', 'Account ID'),
    ('transaction_type', 'Transaction type'),
    ('invtransaction_type', 'Investment transaction type'),
    ('date_initiated', 'Date initiated'),
    ('date_posted', 'Date posted'),
    ('date_funds_available', 'Date funds are available'),
    ('amount', 'Total money amount'),
    ('units', 'Number of units'),
    ('unitprice', 'Unit price'),
    ('fi_id', "Financial institution's ID for this transaction"),
    ('fi_id_corrected',
     'Financial institution ID replaced or corrected by this transaction'),
    ('fi_id_correction_action', 'Action to take on the corrected transaction'),
    ('unique_id', 'Unique ID of the security being traded'),
    ('unique_id_type', 'Format of the unique ID'),
    ('server_transaction_id',
     "Server's transaction ID (confirmation number)"),
    ('check_number', 'Check number'),
    ('reference_number', 'Reference number'),
    ('standard_industrial_code', 'Standard Industrial Code'),
    ('payee_id', 'Payee ID'),
    ('name', 'Name of payee or transaction description'),
    ('memo', 'Extra transaction information (memo)'),
]

_LABELS = {
    StatusRecord: ('Status', STATUS_LABELS),
    AccountRecord: ('Account', ACCOUNT_LABELS),
    StatementRecord: ('Statement', STATEMENT_LABELS),
    SecurityRecord: ('Security', SECURITY_LABELS),
    TransactionRecord: ('Transaction', TRANSACTION_LABELS),
}


def format_value(value: Any) -> str:
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, datetime.datetime):
        return value.isoformat(' ')
    return str(value)


def _format_lines(record: Any, indent: str) -> List[str]:
    title, labels = _LABELS[type(record)]
    lines = [indent + title + ':']
    for field, label in labels:
        if record.is_valid(field):
            lines.append('%s    %s: %s' %
                         (indent, label, format_value(getattr(record, field))))
    if isinstance(record, StatementRecord) and record.balances_valid:
        for balance in record.balances:
            parts = [balance.source_tag]
            if balance.name_valid:
                parts.append(balance.name)
            line = '%s    Balance (%s)' % (indent, ', '.join(parts))
            if balance.amount_valid:
                line += ': %s' % format_value(balance.amount)
            if balance.date_valid:
                line += ' as of %s' % format_value(balance.date)
            lines.append(line)
    if isinstance(record, TransactionRecord) and record.security_valid:
        lines.extend(_format_lines(record.security, indent + '    '))
    return lines


def format_record(record: Any) -> str:
    """Returns the printed block for a record, ending with a blank line."""
    return '\n'.join(_format_lines(record, '')) + '\n\n'


def _version() -> str:
    try:
        return importlib.metadata.version('ofxproc')
    except importlib.metadata.PackageNotFoundError:
        return '0.0.0'


def dump_file(path: str, options: ParseOptions, out=None) -> bool:
    """Prints every record of the OFX file at `path`.

    :returns: `True` if the file parsed successfully.
    """
    if out is None:
        out = sys.stdout

    def write(record: Any) -> None:
        out.write(format_record(record))

    callbacks = Callbacks(
        status=write,
        account=write,
        statement=write,
        transaction=write,
        security=write)
    result = parse_file(path, callbacks, options)
    return result.ok


def main(argv: Optional[Sequence[str]] = None) -> int:
    argparser = argparse.ArgumentParser(
        prog='ofxdump', description='Print the contents of OFX files.')
    argparser.add_argument('ofx_files', nargs='+', metavar='FILE',
                           help='OFX file to dump')
    argparser.add_argument(
        '-V', '--version', action='version',
        version='%(prog)s ' + _version())
    argparser.add_argument('--encoding', type=str,
                           help='Codec to try before the one declared by the file.')
    argparser.add_argument('--log-output', type=str,
                           help='Filename to which log output will be written.')
    argparser.add_argument(
        '-d', '--debug',
        help='Also report the parser trace.',
        action='store_const', dest='loglevel', const=messages.PARSER,
        default=messages.STATUS)
    argparser.add_argument(
        '-v', '--verbose',
        help='Also report debug messages.',
        action='store_const', dest='loglevel', const=logging.DEBUG)
    argparser.add_argument(
        '-q', '--quiet',
        help='Only report errors.',
        action='store_const', dest='loglevel', const=logging.ERROR)
    args = argparser.parse_args(argv)

    logging.basicConfig(filename=args.log_output, level=args.loglevel)

    options = ParseOptions(
        diagnostics=messages.options_for_level(args.loglevel),
        encoding=args.encoding)
    ok = True
    for i, path in enumerate(args.ofx_files):
        if len(args.ofx_files) > 1:
            if i > 0:
                sys.stdout.write('\n')
            sys.stdout.write('==> %s <==\n' % path)
        if not dump_file(path, options):
            ok = False
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
