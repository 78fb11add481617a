"""Builds records from an OFX document and hands them to the consumer.

The consumer registers one handler per record kind in a `Callbacks` value and
calls `parse`:

    def on_transaction(transaction):
        print(transaction.fi_id, transaction.amount)

    result = ofxproc.parse('statement.ofx',
                           ofxproc.Callbacks(transaction=on_transaction))
    if not result.ok:
        print(result.error_kind, result.error)

Records are delivered in the order in which their aggregates close in the
document.  A handler may stop the parse by returning `False` or by raising;
records delivered before that point remain valid.

Implicit closing
================

SGML OFX documents usually leave data elements unclosed, and some producers
also omit the closing tag of aggregates.  The tree builder reads one token at
a time and resolves this as follows:

  - A known aggregate (see `ofxproc.schema.AGGREGATE_TAGS`) opens a container
    immediately.
  - Any other element stays pending until the next token.  If that token is
    an open tag and the element has no text yet, the element is an aggregate
    and gets an unrecognized container; otherwise it is a data element.
  - A data element ends at the next open tag, at any close tag, or at the end
    of input.  A data element without text is ignored.
  - A close tag naming a container below the top of the stack closes every
    container above it first.
  - A close tag that matches nothing is ignored, unless it names a known
    aggregate, or the stack is empty; both are fatal.
  - Containers still open at the end of input are closed in order.
"""

from typing import Any, Callable, Dict, IO, List, NamedTuple, Optional, Union
import enum
import os

from .containers import Container, make_container
from .messages import DiagnosticOptions, Diagnostics, Message
from .records import SecurityRecord
from .scanner import Header, ScanError, Token, TokenKind, decode_document, scan
from .schema import ContainerKind, TagClass, TERMINAL_KINDS, classify


class ErrorKind(enum.Enum):
    STRUCTURAL = 'structural'
    CONSUMER = 'consumer'


class OfxError(Exception):
    """Base class of the errors that abort a parse."""
    kind = None  # type: Optional[ErrorKind]


class StructuralError(OfxError):
    """The document could not be read or its structure is unrecoverable."""
    kind = ErrorKind.STRUCTURAL


class HandlerAbort(OfxError):
    """A consumer handler requested that the parse stop."""
    kind = ErrorKind.CONSUMER


Handler = Optional[Callable[[Any], Any]]


class Callbacks(NamedTuple):
    """Consumer handlers, one per record kind.

    Records of a kind without a handler are still built, since they may
    provide context to other records, but are not delivered.
    """
    status: Handler = None
    account: Handler = None
    statement: Handler = None
    transaction: Handler = None
    security: Handler = None


_HANDLER_FIELDS = {
    ContainerKind.STATUS: 'status',
    ContainerKind.ACCOUNT: 'account',
    ContainerKind.STATEMENT: 'statement',
    ContainerKind.TRANSACTION: 'transaction',
    ContainerKind.SECURITY: 'security',
}


class ParseOptions(NamedTuple):
    diagnostics: DiagnosticOptions = DiagnosticOptions()
    # Codec tried before the one declared by the document header.
    encoding: Optional[str] = None
    # Deepest aggregate nesting accepted before the document is rejected.
    max_depth: int = 64


ParseResult = NamedTuple('ParseResult', [
    ('ok', bool),
    ('error', Optional[OfxError]),
    # `error.kind`, or None on success.
    ('error_kind', Optional[ErrorKind]),
    ('header', Header),
    ('messages', List[Message]),
    ('aggregates_opened', int),
    ('aggregates_closed', int),
    ('records_dispatched', int),
])


class _Pending(object):
    """An element whose kind is not known yet, or a data element in progress."""

    def __init__(self, name: str, tag_class: TagClass) -> None:
        self.name = name
        self.tag_class = tag_class
        self.parts = []  # type: List[str]

    @property
    def text(self) -> str:
        return ''.join(self.parts)

    def has_text(self) -> bool:
        return any(part.strip() for part in self.parts)


class TreeBuilder(object):
    """Consumes scanner tokens and maintains the stack of open containers."""

    def __init__(self,
                 callbacks: Callbacks,
                 diagnostics: Diagnostics,
                 max_depth: int = 64) -> None:
        self.callbacks = callbacks
        self.diagnostics = diagnostics
        self.max_depth = max_depth
        self.stack = []  # type: List[Container]
        self.pending = None  # type: Optional[_Pending]
        self.securities = {}  # type: Dict[str, SecurityRecord]
        self.aggregates_opened = 0
        self.aggregates_closed = 0
        self.records_dispatched = 0

    @property
    def depth(self) -> int:
        return len(self.stack)

    def feed(self, token: Token) -> None:
        if token.kind == TokenKind.OPEN:
            self._handle_open(token.name)
        elif token.kind == TokenKind.TEXT:
            self._handle_text(token.text)
        else:
            self._handle_close(token.name)

    def close(self) -> None:
        """Signals the end of input."""
        self._resolve_pending(None)
        while self.stack:
            self.diagnostics.warning(
                'Closing <%s> at end of input' % self.stack[-1].source_tag)
            self._pop()

    def abandon(self) -> None:
        """Drops all open containers without delivering anything."""
        self.pending = None
        del self.stack[:]

    def _handle_open(self, name: str) -> None:
        self.diagnostics.parser('Open <%s> at depth %d' % (name, self.depth))
        self._resolve_pending(name)
        tag_class = classify(name)
        if tag_class == TagClass.AGGREGATE:
            self._push(name)
        else:
            self.pending = _Pending(name, tag_class)

    def _handle_text(self, text: str) -> None:
        if self.pending is not None:
            self.pending.parts.append(text)
        elif text.strip():
            self.diagnostics.debug('Ignoring text outside of a data element: %r'
                                   % text.strip())

    def _handle_close(self, name: str) -> None:
        self.diagnostics.parser('Close </%s> at depth %d' % (name, self.depth))
        pending = self.pending
        if pending is not None:
            self.pending = None
            self._finish_data_element(pending)
            if pending.name == name:
                return
        index = self._find_open(name)
        if index is None:
            if not self.stack:
                raise StructuralError(
                    'Closing tag </%s> without any open aggregate' % name)
            if classify(name) == TagClass.AGGREGATE:
                raise StructuralError(
                    'Closing tag </%s> does not match any open aggregate' %
                    name)
            self.diagnostics.debug('Ignoring unmatched closing tag </%s>' % name)
            return
        while len(self.stack) > index + 1:
            self.diagnostics.warning('Closing <%s> implicitly at </%s>' %
                                     (self.stack[-1].source_tag, name))
            self._pop()
        self._pop()

    def _resolve_pending(self, next_open: Optional[str]) -> None:
        pending = self.pending
        if pending is None:
            return
        self.pending = None
        if (next_open is not None and pending.tag_class == TagClass.UNKNOWN and
                not pending.has_text()):
            self._push(pending.name)
            return
        self._finish_data_element(pending)

    def _finish_data_element(self, pending: _Pending) -> None:
        if not pending.has_text():
            self.diagnostics.debug('Ignoring empty element <%s>' % pending.name)
            return
        if not self.stack:
            self.diagnostics.debug(
                'Ignoring <%s> outside of any aggregate' % pending.name)
            return
        self.diagnostics.parser('Data <%s>%s' % (pending.name, pending.text))
        self.stack[-1].accept_field(pending.name, pending.text)

    def _find_open(self, name: str) -> Optional[int]:
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].source_tag == name:
                return index
        return None

    def _push(self, name: str) -> None:
        if len(self.stack) >= self.max_depth:
            raise StructuralError('Aggregate <%s> exceeds maximum depth %d' %
                                  (name, self.max_depth))
        parent = self.stack[-1] if self.stack else None
        self.stack.append(make_container(name, parent, self.diagnostics))
        self.aggregates_opened += 1

    def _pop(self) -> None:
        container = self.stack.pop()
        self.aggregates_closed += 1
        kind = container.kind
        if kind == ContainerKind.TRANSACTION:
            unique_id = container.values.get('unique_id')
            if unique_id is not None and unique_id in self.securities:
                container.embed_security(self.securities[unique_id])
        record = container.finalize()
        if kind == ContainerKind.BALANCE:
            statement = container.nearest(ContainerKind.STATEMENT)
            if statement is None:
                self.diagnostics.debug(
                    'Ignoring <%s> outside of a statement' % container.source_tag)
            else:
                statement.add_balance(record)
            return
        if kind == ContainerKind.ACCOUNT:
            statement = container.nearest(ContainerKind.STATEMENT)
            if statement is not None:
                statement.add_account(record)
        elif kind == ContainerKind.SECURITY:
            if record.unique_id_valid:
                self.securities[record.unique_id] = record
        elif kind == ContainerKind.STATUS:
            self._report_status(record)
        if kind in TERMINAL_KINDS:
            self._dispatch(kind, record)

    def _report_status(self, status) -> None:
        self.diagnostics.status('%s status for <%s>: %s %s' % (
            status.severity.name if status.severity_valid else 'Unknown',
            status.ofx_element_name or 'document',
            status.code if status.code_valid else '-',
            status.name or ''))

    def _dispatch(self, kind: ContainerKind, record: Any) -> None:
        field = _HANDLER_FIELDS[kind]
        handler = getattr(self.callbacks, field)
        if handler is None:
            self.diagnostics.parser('No %s handler registered' % field)
            return
        self.records_dispatched += 1
        try:
            result = handler(record)
        except Exception as e:
            raise HandlerAbort('%s handler failed: %r' % (field, e)) from e
        if result is False:
            raise HandlerAbort('%s handler requested abort' % field)


Source = Union[str, bytes, bytearray, 'os.PathLike[str]', IO[Any]]


def _read_source(source: Source) -> Union[bytes, str]:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if hasattr(source, 'read'):
        return source.read()  # type: ignore
    with open(source, 'rb') as f:  # type: ignore
        return f.read()


def _run(data: Union[bytes, str], builder: TreeBuilder,
         options: ParseOptions) -> Header:
    try:
        header, body = decode_document(data, options.encoding)
    except ScanError as e:
        raise StructuralError(str(e)) from e
    for key, value in header.items():
        builder.diagnostics.debug('Header %s: %s' % (key, value))
    try:
        for token in scan(body):
            builder.feed(token)
    except ScanError as e:
        raise StructuralError(str(e)) from e
    builder.close()
    return header


def _parse_data(load: Callable[[], Union[bytes, str]], callbacks: Callbacks,
                options: ParseOptions) -> ParseResult:
    diagnostics = Diagnostics(options.diagnostics)
    builder = TreeBuilder(callbacks, diagnostics, options.max_depth)
    header = {}  # type: Header
    error = None  # type: Optional[OfxError]
    try:
        try:
            data = load()
        except OSError as e:
            raise StructuralError('Unable to read document: %s' % e) from e
        header = _run(data, builder, options)
    except OfxError as e:
        error = e
        diagnostics.error(str(e))
        builder.abandon()
    return ParseResult(
        ok=error is None,
        error=error,
        error_kind=error.kind if error is not None else None,
        header=header,
        messages=diagnostics.messages,
        aggregates_opened=builder.aggregates_opened,
        aggregates_closed=builder.aggregates_closed,
        records_dispatched=builder.records_dispatched)


def parse(source: Source,
          callbacks: Callbacks = Callbacks(),
          options: ParseOptions = ParseOptions()) -> ParseResult:
    """Parses an OFX document, delivering records to `callbacks`.

    :param source: A filesystem path, a binary or text file object, or the
        raw document bytes.
    :returns: The outcome of the parse.  Errors are reported in the result,
        never raised.
    """
    return _parse_data(lambda: _read_source(source), callbacks, options)


def parse_file(path: Union[str, 'os.PathLike[str]'],
               callbacks: Callbacks = Callbacks(),
               options: ParseOptions = ParseOptions()) -> ParseResult:
    """Parses the OFX document at `path`."""
    return parse(os.fspath(path), callbacks, options)


def parse_string(text: str,
                 callbacks: Callbacks = Callbacks(),
                 options: ParseOptions = ParseOptions()) -> ParseResult:
    """Parses an already decoded OFX document."""
    return _parse_data(lambda: text, callbacks, options)
