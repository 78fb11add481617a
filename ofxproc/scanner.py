"""Lexical scanner for OFX documents.

An OFX 1.x document is SGML: a block of `KEY:VALUE` header lines followed by
markup in which data elements are usually left unclosed, e.g.

    OFXHEADER:100
    DATA:OFXSGML
    ...

    <OFX>
    <SIGNONMSGSRSV1>
    <SONRS>
    <STATUS>
    <CODE>0
    <SEVERITY>INFO
    </STATUS>
    ...

An OFX 2.x document is XML, with the header carried by `<?xml ...?>` and
`<?OFX ...?>` processing instructions and every element explicitly closed.

The scanner does not know anything about which elements are aggregates.  It
turns the markup into a flat stream of `Token` values (open tag, text, close
tag) and leaves the tree building to `ofxproc.parser`.
"""

from typing import Dict, Iterator, NamedTuple, Optional, Tuple, Union
import collections
import enum
import html
import re

import bs4


class ScanError(Exception):
    """Raised when the document cannot be tokenized."""

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        if offset is not None:
            message = '%s (at offset %d)' % (message, offset)
        super().__init__(message)
        self.offset = offset


class TokenKind(enum.Enum):
    OPEN = 'open'
    TEXT = 'text'
    CLOSE = 'close'


Token = NamedTuple('Token', [
    ('kind', TokenKind),
    ('name', Optional[str]),
    ('text', Optional[str]),
    ('offset', int),
])

Header = Dict[str, str]

_TAG_NAME_RE = re.compile(r'^[A-Za-z0-9._:-]+$')
_PSEUDO_ATTR_RE = re.compile(r'([A-Za-z]+)\s*=\s*"([^"]*)"')
_HEADER_LINE_RE = re.compile(r'^\s*([A-Za-z0-9]+)\s*:(.*)$')

# Maps the ENCODING/CHARSET header pair of an OFX 1.x document to a Python
# codec.
_CHARSET_CODECS = {
    '1252': 'cp1252',
    'ISO-8859-1': 'latin-1',
    '8859-1': 'latin-1',
    'UTF-8': 'utf-8',
}


def parse_header(text: str) -> Header:
    """Parses the OFX 1.x `KEY:VALUE` header lines that precede the markup."""
    header = collections.OrderedDict()  # type: Header
    for line in text.splitlines():
        m = _HEADER_LINE_RE.match(line)
        if m is None:
            continue
        header[m.group(1).upper()] = m.group(2).strip()
    return header


def parse_processing_instruction(body: str) -> Header:
    """Parses the pseudo-attributes of an `<?xml ...?>` or `<?OFX ...?>`."""
    return collections.OrderedDict(
        (key.upper(), value) for key, value in _PSEUDO_ATTR_RE.findall(body))


def header_codec(header: Header) -> Optional[str]:
    """Returns the Python codec implied by a document header, if any."""
    encoding = header.get('ENCODING', '').upper()
    if encoding in ('UTF-8', 'UTF8'):
        return 'utf-8'
    charset = header.get('CHARSET', '').upper()
    if charset in _CHARSET_CODECS:
        return _CHARSET_CODECS[charset]
    if encoding == 'USASCII':
        return 'cp1252'
    return None


def split_header(text: str) -> Tuple[Header, str]:
    """Splits a decoded document into its header and its markup body.

    For OFX 2.x documents the header is read from the leading processing
    instructions, which are left in the body (the scanner skips them).
    """
    start = text.find('<')
    if start == -1:
        return parse_header(text), ''
    prefix = text[:start]
    body = text[start:]
    header = parse_header(prefix)
    pos = 0
    while body.startswith('<?', pos):
        end = body.find('?>', pos)
        if end == -1:
            break
        header.update(parse_processing_instruction(body[pos + 2:end]))
        pos = end + 2
        while pos < len(body) and body[pos].isspace():
            pos += 1
    return header, body


def _sniff_header(data: bytes) -> Header:
    start = data.find(b'<')
    prefix = data if start == -1 else data[:start + 512]
    header = parse_header(prefix.decode('ascii', 'replace').split('<', 1)[0])
    m = re.search(rb'<\?xml[^>]*encoding\s*=\s*"([^"]+)"', prefix)
    if m is not None:
        header['ENCODING'] = m.group(1).decode('ascii', 'replace')
    return header


def decode_document(data: Union[bytes, str],
                    encoding: Optional[str] = None) -> Tuple[Header, str]:
    """Decodes raw document contents and splits off the header.

    :param data: The raw document, either bytes or an already decoded string.
    :param encoding: Optional.  Codec to try before the one implied by the
        document header.
    :raises ScanError: if the bytes cannot be decoded with any candidate codec.
    """
    if isinstance(data, str):
        return split_header(data)
    candidates = []
    if encoding is not None:
        candidates.append(encoding)
    codec = header_codec(_sniff_header(data))
    if codec is not None and codec not in candidates:
        candidates.append(codec)
    dammit = bs4.UnicodeDammit(data, candidates)
    if dammit.unicode_markup is None:
        raise ScanError('Unable to decode document (tried %s)' %
                        (', '.join(candidates) or 'autodetection'))
    return split_header(dammit.unicode_markup)


def _tag_name(body: str, offset: int) -> str:
    name = body.split(None, 1)[0] if body.strip() else ''
    if not name:
        raise ScanError('Empty tag name', offset)
    if _TAG_NAME_RE.match(name) is None:
        raise ScanError('Invalid tag name %r' % name, offset)
    return name.upper()


def scan(body: str) -> Iterator[Token]:
    """Yields the tokens of an OFX markup body.

    Text tokens carry the raw text between two tags, including surrounding
    whitespace and unexpanded character entities.  The content of a CDATA
    section is yielded as text with `&`, `<` and `>` escaped, so that it reads
    back literally once entities are expanded.

    :raises ScanError: on an unterminated tag, comment or CDATA section, or a
        malformed tag.
    """
    pos = 0
    end = len(body)
    while pos < end:
        lt = body.find('<', pos)
        if lt == -1:
            yield Token(TokenKind.TEXT, None, body[pos:], pos)
            return
        if lt > pos:
            yield Token(TokenKind.TEXT, None, body[pos:lt], pos)
        if body.startswith('<!--', lt):
            close = body.find('-->', lt + 4)
            if close == -1:
                raise ScanError('Unterminated comment', lt)
            pos = close + 3
            continue
        if body.startswith('<![CDATA[', lt):
            close = body.find(']]>', lt + 9)
            if close == -1:
                raise ScanError('Unterminated CDATA section', lt)
            yield Token(TokenKind.TEXT, None,
                        html.escape(body[lt + 9:close], quote=False), lt)
            pos = close + 3
            continue
        gt = body.find('>', lt + 1)
        if gt == -1:
            raise ScanError('Unterminated tag', lt)
        nested = body.find('<', lt + 1, gt)
        if nested != -1:
            raise ScanError('Unterminated tag', lt)
        inner = body[lt + 1:gt]
        pos = gt + 1
        if inner.startswith('?') or inner.startswith('!'):
            continue
        if inner.startswith('/'):
            yield Token(TokenKind.CLOSE, _tag_name(inner[1:], lt), None, lt)
            continue
        if inner.endswith('/'):
            name = _tag_name(inner[:-1], lt)
            yield Token(TokenKind.OPEN, name, None, lt)
            yield Token(TokenKind.CLOSE, name, None, lt)
            continue
        yield Token(TokenKind.OPEN, _tag_name(inner, lt), None, lt)
