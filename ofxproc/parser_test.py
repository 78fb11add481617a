import datetime
import io
import os

import pytest
from beancount.core.number import D
from dateutil import tz

from .messages import DiagnosticOptions
from .parser import (Callbacks, ErrorKind, HandlerAbort, ParseOptions,
                     StructuralError, parse, parse_file, parse_string)
from .records import (AccountRecord, AccountType, InvestmentTransactionType,
                      SecurityRecord, Severity, StatementRecord, StatusRecord,
                      TransactionRecord, TransactionType)
from .test_util import (RecordCollector, collect_file, collect_string,
                        testdata_dir)

HEADER = '''OFXHEADER:100
DATA:OFXSGML
VERSION:102
SECURITY:NONE
ENCODING:USASCII
CHARSET:1252
COMPRESSION:NONE
OLDFILEUID:NONE
NEWFILEUID:NONE

'''

BANK_STATEMENT = HEADER + '''<OFX>
<SIGNONMSGSRSV1><SONRS><STATUS><CODE>0<SEVERITY>INFO</STATUS></SONRS></SIGNONMSGSRSV1>
<BANKMSGSRSV1><STMTTRNRS><STMTRS><CURDEF>USD
<BANKACCTFROM><BANKID>001<ACCTID>12345<ACCTTYPE>CHECKING</BANKACCTFROM>
<BANKTRANLIST>
<STMTTRN><TRNTYPE>%s<DTPOSTED>20240105<TRNAMT>-42.50<FITID>1</STMTTRN>
</BANKTRANLIST>
</STMTRS></STMTTRNRS></BANKMSGSRSV1></OFX>
'''

THREE_TRANSACTIONS = HEADER + '''<OFX><BANKMSGSRSV1><STMTTRNRS><STMTRS>
<CURDEF>USD
<BANKACCTFROM><BANKID>001<ACCTID>12345</BANKACCTFROM>
<BANKTRANLIST>
<STMTTRN><TRNTYPE>DEBIT<TRNAMT>-1.00<FITID>1</STMTTRN>
<STMTTRN><TRNTYPE>DEBIT<TRNAMT>-2.00<FITID>2</STMTTRN>
<STMTTRN><TRNTYPE>DEBIT<TRNAMT>-3.00<FITID>3</STMTTRN>
</BANKTRANLIST>
</STMTRS></STMTTRNRS></BANKMSGSRSV1></OFX>
'''


def test_round_trip():
    result, collector = collect_string(BANK_STATEMENT % 'DEBIT')
    assert result.ok
    assert result.error is None
    assert result.error_kind is None
    assert [type(r) for r in collector.records] == [
        StatusRecord, AccountRecord, TransactionRecord, StatementRecord
    ]
    status, account, transaction, statement = collector.records
    assert status.ofx_element_name == 'SONRS'
    assert status.severity == Severity.INFO
    assert status.code == 0
    assert account.account_id == '001 12345'
    assert account.currency == 'USD'
    assert account.account_type == AccountType.CHECKING
    assert transaction.account_id == account.account_id
    assert transaction.transaction_type == TransactionType.DEBIT
    assert transaction.amount == D('-42.50')
    assert transaction.date_posted == datetime.datetime(
        2024, 1, 5, tzinfo=tz.UTC)
    assert transaction.fi_id == '1'
    assert statement.currency == 'USD'
    assert statement.account_id == '001 12345'
    assert statement.account == account
    assert result.records_dispatched == 4
    assert result.header['VERSION'] == '102'


def test_unknown_transaction_type():
    result, collector = collect_string(BANK_STATEMENT % 'FOOBAR')
    assert result.ok
    [transaction] = collector.of_type(TransactionRecord)
    assert transaction.transaction_type == TransactionType.UNKNOWN
    assert transaction.transaction_type_valid


def test_handler_abort():
    transactions = RecordCollector(abort_after=1)
    statements = RecordCollector()
    result = parse_string(
        THREE_TRANSACTIONS,
        Callbacks(transaction=transactions, statement=statements))
    assert not result.ok
    assert result.error_kind == ErrorKind.CONSUMER
    assert isinstance(result.error, HandlerAbort)
    assert [t.fi_id for t in transactions.records] == ['1']
    assert statements.records == []
    assert result.records_dispatched == 1


def test_handler_exception_aborts():

    def fail(record):
        raise RuntimeError('boom')

    result = parse_string(THREE_TRANSACTIONS, Callbacks(transaction=fail))
    assert result.error_kind == ErrorKind.CONSUMER
    assert isinstance(result.error.__cause__, RuntimeError)
    assert result.messages[-1][0] == 'ERROR'


def test_handler_return_values_other_than_false_continue():
    seen = []

    def handler(record):
        seen.append(record)
        return None

    result = parse_string(THREE_TRANSACTIONS, Callbacks(transaction=handler))
    assert result.ok
    assert len(seen) == 3


def test_idempotent():
    first_result, first = collect_string(THREE_TRANSACTIONS)
    second_result, second = collect_string(THREE_TRANSACTIONS)
    assert first.records == second.records
    assert first_result == second_result


def test_open_close_balance():
    result, _ = collect_string(BANK_STATEMENT % 'DEBIT')
    assert result.aggregates_opened == 10
    assert result.aggregates_closed == 10


def test_no_handlers():
    result = parse_string(BANK_STATEMENT % 'DEBIT')
    assert result.ok
    assert result.records_dispatched == 0


def test_unknown_aggregates():
    text = ('<OFX><FOOBAR><X>1</FOOBAR>'
            '<INTU.WRAP><STMTRS><INTU.BID>3000<CURDEF>USD</STMTRS></INTU.WRAP>'
            '</OFX>')
    result, collector = collect_string(text)
    assert result.ok
    [statement] = collector.records
    assert statement.currency == 'USD'
    assert result.aggregates_opened == 4
    assert ('INFO', 'Created container to hold unsupported aggregate <FOOBAR>'
            ) in result.messages


def test_empty_elements_are_ignored():
    text = ('<STMTRS><CURDEF></CURDEF><FOO></FOO>'
            '<BANKTRANLIST><STMTTRN><MEMO><NAME>X</STMTTRN></BANKTRANLIST>'
            '</STMTRS>')
    result, collector = collect_string(text)
    assert result.ok
    transaction, statement = collector.records
    assert not transaction.memo_valid
    assert transaction.name == 'X'
    assert not statement.currency_valid
    assert result.aggregates_opened == 3


@pytest.mark.parametrize('text', [
    '<OFX></OFX></OFX>',
    '</OFX>',
    '<OFX></STMTRS>',
])
def test_stack_underflow(text: str):
    result, collector = collect_string(text)
    assert not result.ok
    assert result.error_kind == ErrorKind.STRUCTURAL
    assert isinstance(result.error, StructuralError)


def test_unmatched_close_of_data_element_is_ignored():
    result, collector = collect_string(
        '<OFX><STMTRS><CURDEF>USD</FOO></STMTRS></OFX>')
    assert result.ok
    [statement] = collector.records
    assert statement.currency == 'USD'


def test_implicit_close_of_intervening_containers():
    result, collector = collect_string(
        '<OFX><STMTRS><BANKTRANLIST><STMTTRN><TRNAMT>1</STMTRS></OFX>')
    assert result.ok
    assert [type(r) for r in collector.records] == [
        TransactionRecord, StatementRecord
    ]
    assert collector.records[0].amount == D('1')
    warnings = [text for level, text in result.messages if level == 'WARNING']
    assert warnings == [
        'Closing <STMTTRN> implicitly at </STMTRS>',
        'Closing <BANKTRANLIST> implicitly at </STMTRS>',
    ]


def test_truncated_document_closes_open_containers():
    result, collector = collect_string(
        HEADER + '<OFX><BANKMSGSRSV1><STMTTRNRS><STMTRS><CURDEF>USD'
        '<BANKTRANLIST><STMTTRN><TRNAMT>1.00')
    assert result.ok
    assert [type(r) for r in collector.records] == [
        TransactionRecord, StatementRecord
    ]
    assert collector.records[0].amount == D('1.00')
    assert collector.records[1].currency == 'USD'
    warnings = [text for level, text in result.messages if level == 'WARNING']
    assert len(warnings) == 6
    assert result.aggregates_opened == result.aggregates_closed == 6


def test_truncated_inside_tag():
    result, collector = collect_string(
        '<OFX><STMTRS><CURDEF>USD<BANKTRANLIST><STMTTRN></STMTTRN><BANKTR')
    assert not result.ok
    assert result.error_kind == ErrorKind.STRUCTURAL
    assert 'Unterminated tag' in str(result.error)
    assert [type(r) for r in collector.records] == [TransactionRecord]


def test_max_depth():
    result, _ = collect_string(
        '<OFX><BANKMSGSRSV1><STMTTRNRS><STMTRS></STMTRS>',
        ParseOptions(max_depth=3))
    assert result.error_kind == ErrorKind.STRUCTURAL
    assert 'maximum depth 3' in str(result.error)


def test_truncation_is_not_fatal():
    result, collector = collect_string(
        '<STMTTRN><NAME>%s<MEMO>m</STMTTRN>' % ('N' * 40))
    assert result.ok
    [transaction] = collector.records
    assert transaction.name == 'N' * 32
    assert transaction.memo == 'm'
    assert any(level == 'WARNING' and 'truncated' in text
               for level, text in result.messages)


@pytest.mark.parametrize('tag,text,field', [
    ('DTPOSTED', '20240105120000[99:XYZ]', 'date_posted'),
    ('TRNAMT', '1.234.50', 'amount'),
    ('TRNAMT', '1,23.45', 'amount'),
])
def test_malformed_values_are_left_unset(tag: str, text: str, field: str):
    result, collector = collect_string(
        '<STMTTRN><%s>%s<FITID>7</STMTTRN>' % (tag, text))
    assert result.ok
    [transaction] = collector.records
    assert getattr(transaction, field) is None
    assert not getattr(transaction, field + '_valid')
    assert transaction.fi_id == '7'
    assert any(
        level == 'WARNING' and message.startswith('Ignoring <%s>' % tag)
        for level, message in result.messages)


def test_european_grouped_amount():
    result, collector = collect_string('<STMTTRN><TRNAMT>1.234,50</STMTTRN>')
    assert result.ok
    [transaction] = collector.records
    assert transaction.amount == D('1234.50')


def test_cdata_section():
    result, collector = collect_string(
        '<OFX><STMTTRN><NAME><![CDATA[AT&T <wireless>]]></NAME>'
        '<MEMO> <![CDATA[a]]>&amp;b </MEMO><TRNAMT>1</TRNAMT></STMTTRN></OFX>')
    assert result.ok
    [transaction] = collector.records
    assert transaction.name == 'AT&T <wireless>'
    assert transaction.memo == 'a&b'


def test_unterminated_cdata_section():
    result, collector = collect_string(
        '<OFX><STMTTRN><NAME><![CDATA[AT&T</NAME></STMTTRN></OFX>')
    assert result.error_kind == ErrorKind.STRUCTURAL
    assert 'Unterminated CDATA section' in str(result.error)
    assert collector.records == []


def test_status_message_channel():
    result, _ = collect_string(BANK_STATEMENT % 'DEBIT')
    assert ('STATUS', 'INFO status for <SONRS>: 0 Success') in result.messages


def test_default_diagnostics_omit_debug_and_parser_trace():
    result, _ = collect_string(BANK_STATEMENT % 'DEBIT')
    levels = set(level for level, _ in result.messages)
    assert 'DEBUG' not in levels
    assert 'PARSER' not in levels


def test_all_diagnostics():
    options = ParseOptions(diagnostics=DiagnosticOptions(parser=True,
                                                         debug=True))
    result, _ = collect_string(BANK_STATEMENT % 'DEBIT', options)
    levels = set(level for level, _ in result.messages)
    assert {'PARSER', 'DEBUG', 'STATUS', 'INFO'} <= levels


def test_no_diagnostics():
    options = ParseOptions(diagnostics=DiagnosticOptions(
        status=False, info=False, warning=False, error=False))
    result, _ = collect_string('</OFX>', options)
    assert not result.ok
    assert result.messages == []


def test_parse_bytes_and_file_objects():
    data = (BANK_STATEMENT % 'DEBIT').encode('cp1252')
    from_bytes = RecordCollector()
    assert parse(data, from_bytes.callbacks()).ok
    from_file = RecordCollector()
    assert parse(io.BytesIO(data), from_file.callbacks()).ok
    assert from_bytes.records == from_file.records
    assert len(from_bytes.records) == 4


def test_missing_file():
    result = parse_file(os.path.join(testdata_dir, 'ofx', 'missing.ofx'))
    assert not result.ok
    assert result.error_kind == ErrorKind.STRUCTURAL
    assert isinstance(result.error.__cause__, OSError)


def test_checking_file():
    result, collector = collect_file(
        os.path.join(testdata_dir, 'ofx', 'checking.ofx'))
    assert result.ok
    assert result.header['CHARSET'] == '1252'
    transactions = collector.of_type(TransactionRecord)
    assert [t.name for t in transactions] == [
        'COFFEE & BAGELS', 'RENT', 'ACME CORP PAYROLL'
    ]
    assert transactions[0].date_posted == datetime.datetime(
        2024, 1, 5, 17, tzinfo=tz.UTC)
    assert transactions[1].check_number == '1042'
    [statement] = collector.of_type(StatementRecord)
    assert statement.date_start == datetime.datetime(2024, 1, 1, tzinfo=tz.UTC)
    assert statement.ledger_balance == D('3307.50')
    assert statement.available_balance == D('3207.50')
    assert statement.available_balance_date == datetime.datetime(
        2024, 1, 31, tzinfo=tz.UTC)
    assert len(statement.balances) == 2


def test_investment_statement():
    result, collector = collect_file(
        os.path.join(testdata_dir, 'ofx', 'investment.ofx'))
    assert result.ok
    assert result.header['OFXHEADER'] == '200'
    assert result.header['VERSION'] == '211'
    assert [type(r) for r in collector.records] == [
        StatusRecord, SecurityRecord, StatusRecord, AccountRecord,
        TransactionRecord, TransactionRecord, TransactionRecord,
        StatementRecord
    ]
    [security] = collector.of_type(SecurityRecord)
    assert security.unique_id == '922908769'
    assert security.unique_id_type == 'CUSIP'
    assert security.ticker == 'EXTSX'
    assert security.unitprice == D('250.12')

    [account] = collector.of_type(AccountRecord)
    assert account.account_type == AccountType.INVESTMENT
    assert account.account_id == 'example.com 88776655'
    assert account.currency == 'USD'
    assert (account.account_name ==
            'Investment account 88776655 at broker example.com')

    buy, income, cash = collector.of_type(TransactionRecord)
    assert buy.invtransaction_type == InvestmentTransactionType.BUYSTOCK
    assert buy.account_id == account.account_id
    assert buy.fi_id == 'T-1001'
    assert buy.units == D('4')
    assert buy.unitprice == D('245.50')
    assert buy.amount == D('-982.00')
    assert buy.date_initiated == datetime.datetime(2024, 2, 12, tzinfo=tz.UTC)
    assert buy.date_posted == datetime.datetime(2024, 2, 14, tzinfo=tz.UTC)
    assert buy.memo == 'Buy'
    assert buy.security == security

    assert income.invtransaction_type == InvestmentTransactionType.INCOME
    assert income.amount == D('12.34')
    assert income.security == security

    assert cash.transaction_type == TransactionType.CREDIT
    assert not cash.invtransaction_type_valid
    assert not cash.security_valid
    assert cash.account_id == account.account_id

    [statement] = collector.of_type(StatementRecord)
    assert statement.account == account
    assert statement.date_end == datetime.datetime(2024, 2, 29, tzinfo=tz.UTC)
