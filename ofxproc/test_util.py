from typing import Any, List, Optional, Tuple
import os
import re

from .parser import Callbacks, ParseOptions, ParseResult, parse, parse_string

testdata_dir = os.path.realpath(
    os.path.join(os.path.dirname(__file__), '..', 'testdata'))


class RecordCollector(object):
    """Records every delivered record, in delivery order."""

    def __init__(self, abort_after: Optional[int] = None) -> None:
        self.records = []  # type: List[Any]
        self.abort_after = abort_after

    def __call__(self, record: Any) -> bool:
        self.records.append(record)
        if self.abort_after is not None and len(
                self.records) >= self.abort_after:
            return False
        return True

    def of_type(self, record_type) -> List[Any]:
        return [r for r in self.records if isinstance(r, record_type)]

    def callbacks(self) -> Callbacks:
        return Callbacks(
            status=self,
            account=self,
            statement=self,
            transaction=self,
            security=self)


def collect_string(text: str, options: ParseOptions = ParseOptions()
                   ) -> Tuple[ParseResult, RecordCollector]:
    collector = RecordCollector()
    result = parse_string(text, collector.callbacks(), options)
    return result, collector


def collect_file(path: str, options: ParseOptions = ParseOptions()
                 ) -> Tuple[ParseResult, RecordCollector]:
    collector = RecordCollector()
    result = parse(path, collector.callbacks(), options)
    return result, collector


def check_golden_contents(path: str,
                          expected_contents: str,
                          replacements: List[Tuple[str, str]] = [],
                          write: Optional[bool] = None) -> None:
    """Check that the contents of the file at `path` matches `expected_contents`.

    The `replacements` parameter specifies a sequence of `(old, new)` used to
    normalize `expected_contents`.  Any line that contains `old` followed by a
    filename has the `old` prefix replaced with `new`, and any backslashes in
    the remainder of the filename replaced with forward slashes.

    If `write == True`, instead of matching the existing contents of `path`, the
    value of `expected_contents` after applying `replacements` is written to
    `path`.  By default, `write` is taken from the environment variable
    `OFXPROC_GENERATE_GOLDEN_TESTDATA`.
    """
    if write is None:
        write = os.getenv('OFXPROC_GENERATE_GOLDEN_TESTDATA', None) == '1'

    for old, new in replacements:

        def get_replacement(m) -> str:
            return new + m.group(1).replace('\\', '/')

        expected_contents = re.sub(
            re.escape(old) + r'(\S*)', get_replacement, expected_contents)

    if write:
        dir_name = os.path.dirname(path)
        if not os.path.exists(dir_name):
            os.makedirs(dir_name)
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(expected_contents)
    else:
        with open(path, 'r', encoding='utf-8', newline='\n') as f:
            contents = f.read()
        assert contents == expected_contents
