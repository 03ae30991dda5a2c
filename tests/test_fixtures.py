"""Data-driven scanner tests.

Each ``.dat`` file under tests/data holds cases in the html5lib-tests layout::

    #data
    <markup>
    #errors
    (line,column): code - message
    #document
    | <html>

``#errors`` holds at most one line since the first failure ends the scan. The
``#document`` tree is whatever had been built when the scan stopped.
"""

import unittest
from dataclasses import dataclass
from pathlib import Path

from pipehtml import ParseError, Scanner, to_test_format

DATA_DIR = Path(__file__).parent / "data"


@dataclass
class FixtureCase:
    data: str
    errors: list
    document: str


def read_dat_file(path):
    """Split a .dat file into FixtureCase objects."""
    cases = []
    sections = None
    mode = None
    for line in path.read_text(encoding="utf-8").split("\n"):
        if line == "#data":
            if sections is not None:
                cases.append(_make_case(sections))
            sections = {"data": [], "errors": [], "document": []}
            mode = "data"
        elif line in ("#errors", "#document") and sections is not None:
            mode = line[1:]
        elif mode is not None:
            sections[mode].append(line)
    if sections is not None:
        cases.append(_make_case(sections))
    return cases


def _make_case(sections):
    document = sections["document"]
    # Blank separator line before the next #data
    if document and document[-1] == "":
        document = document[:-1]
    return FixtureCase(
        data="\n".join(sections["data"]),
        errors=[line for line in sections["errors"] if line],
        document="\n".join(document),
    )


def run_case(case):
    scanner = Scanner()
    errors = []
    try:
        scanner.feed(case.data)
        scanner.close()
    except ParseError as exc:
        errors.append(str(exc))
    return errors, to_test_format(scanner.result)


class TestDatFixtures(unittest.TestCase):
    def test_fixture_files_present(self):
        assert sorted(DATA_DIR.glob("*.dat"))

    def test_reader_splits_cases(self):
        cases = read_dat_file(DATA_DIR / "scanner.dat")
        assert len(cases) == 23
        assert cases[0].data.startswith("<!DOCTYPE html>")
        assert cases[0].errors == []
        assert cases[-1].errors == ["(1,13): incomplete-document - Document incomplete"]

    def test_fixtures(self):
        for path in sorted(DATA_DIR.glob("*.dat")):
            for index, case in enumerate(read_dat_file(path)):
                with self.subTest(file=path.name, index=index, data=case.data):
                    errors, document = run_case(case)
                    assert errors == case.errors
                    assert document == case.document


if __name__ == "__main__":
    unittest.main()
