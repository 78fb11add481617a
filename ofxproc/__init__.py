"""Event-driven parser for OFX (Open Financial Exchange) documents.

An OFX document, either SGML (OFX 1.x) or XML (OFX 2.x), is read in a single
pass.  As each recognized aggregate closes, a typed record is built and
handed to the matching handler registered in a `Callbacks` value:

  - `StatusRecord` for <STATUS>
  - `AccountRecord` for <BANKACCTFROM>, <CCACCTFROM> and <INVACCTFROM>
  - `StatementRecord` for <STMTRS>, <CCSTMTRS> and <INVSTMTRS>
  - `TransactionRecord` for <STMTTRN> and the investment transactions
  - `SecurityRecord` for the entries of <SECLIST>

See `ofxproc.parser` for the parsing rules and `ofxproc.records` for the
record fields.
"""

from .messages import DiagnosticOptions
from .parser import (Callbacks, ErrorKind, HandlerAbort, OfxError,
                     ParseOptions, ParseResult, StructuralError, parse,
                     parse_file, parse_string)
from .records import (AccountRecord, AccountType, BalanceRecord,
                      CorrectionAction, InvestmentTransactionType,
                      SecurityRecord, Severity, StatementRecord, StatusRecord,
                      TransactionRecord, TransactionType)
