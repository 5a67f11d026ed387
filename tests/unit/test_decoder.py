"""Tests for result page decoding and pagination."""

import pytest
from unittest.mock import call
from datetime import datetime

from athena_client.column import Column, ParserKind
from athena_client.decoder import ResultPageDecoder, parse_rows
from athena_client.exceptions import InvalidNumberError, UnsupportedColumnTypeError
from athena_client.query import Query
from athena_client.transport import ResultPage

COLUMNS = [('name', 'varchar'), ('count', 'integer')]


def make_query():
    query = Query(original_sql="SELECT name, count FROM t", sql="SELECT name, count FROM t")
    query.assign_execution_id('exec-123')
    return query


def data_rows(count, start=0):
    return [[f'row-{i}', str(i)] for i in range(start, start + count)]


class TestParseRows:
    """Tests for parse_rows."""

    def test_first_page_skips_header(self):
        """Row 0 is dropped on the first page."""
        columns = [Column('name', ParserKind.STRING), Column('count', ParserKind.NUMBER)]
        rows = [['name', 'count'], ['a', '1'], ['b', '2']]

        records = parse_rows(rows, columns, is_first_page=True)

        assert records == [{'name': 'a', 'count': 1}, {'name': 'b', 'count': 2}]

    def test_other_pages_keep_every_row(self):
        """All rows are decoded on later pages."""
        columns = [Column('name', ParserKind.STRING)]

        records = parse_rows([['a'], ['b'], ['c']], columns)

        assert len(records) == 3

    def test_missing_values_become_none(self):
        """Cells without a value are None, not parsed."""
        columns = [Column('count', ParserKind.NUMBER), Column('flag', ParserKind.BOOLEAN)]

        records = parse_rows([[None, None]], columns)

        assert records == [{'count': None, 'flag': None}]

    def test_duplicate_names_overwrite(self):
        """The later column wins when names collide."""
        columns = [Column('x', ParserKind.STRING), Column('x', ParserKind.NUMBER)]

        assert parse_rows([['a', '2']], columns) == [{'x': 2}]

    def test_invalid_cell_propagates(self):
        """Parser errors are not swallowed."""
        columns = [Column('count', ParserKind.NUMBER)]

        with pytest.raises(InvalidNumberError):
            parse_rows([['abc']], columns)


class TestDecodePage:
    """Tests for ResultPageDecoder.decode_page."""

    def test_columns_bound_from_first_page(self, transport):
        """Column bindings come from the first page's metadata."""
        query = make_query()
        decoder = ResultPageDecoder(transport)
        page = ResultPage(
            column_info=[{'Name': 'day', 'Type': 'date'}],
            rows=[['day'], ['2024-03-01']],
        )

        decoder.decode_page(query, page, None)

        assert query.columns == [Column('day', ParserKind.DATE)]
        assert query.results == [{'day': datetime(2024, 3, 1)}]

    def test_columns_reused_across_pages(self, transport):
        """Later pages do not rebind columns."""
        query = make_query()
        query.bind_columns([Column('name', ParserKind.STRING)])
        decoder = ResultPageDecoder(transport)
        page = ResultPage(column_info=[{'Name': 'other', 'Type': 'map'}], rows=[['a']])

        decoder.decode_page(query, page, 'token-1')

        assert query.results == [{'name': 'a'}]

    def test_refetched_first_page_after_results_keeps_row_zero(self, transport):
        """With results already accumulated, row 0 is data."""
        query = make_query()
        query.bind_columns([Column('name', ParserKind.STRING)])
        query.add_results([{'name': 'earlier'}])
        decoder = ResultPageDecoder(transport)

        records = decoder.decode_page(query, ResultPage(rows=[['a'], ['b']]), None)

        assert records == [{'name': 'a'}, {'name': 'b'}]

    def test_unsupported_column_aborts(self, transport):
        """An unsupported column type fails decoding."""
        query = make_query()
        decoder = ResultPageDecoder(transport)
        page = ResultPage(column_info=[{'Name': 'blob', 'Type': 'binary'}], rows=[['blob']])

        with pytest.raises(UnsupportedColumnTypeError):
            decoder.decode_page(query, page, None)

        assert query.results == []


class TestDrain:
    """Tests for pagination."""

    def test_single_page(self, transport, mock_athena, results_page):
        """A page without a token ends pagination."""
        mock_athena.get_query_results.return_value = results_page(
            COLUMNS, data_rows(3), include_header=True
        )
        query = make_query()

        results = ResultPageDecoder(transport).drain(query)

        assert results == [
            {'name': 'row-0', 'count': 0},
            {'name': 'row-1', 'count': 1},
            {'name': 'row-2', 'count': 2},
        ]
        assert results is query.results
        mock_athena.get_query_results.assert_called_once()

    def test_three_pages(self, transport, mock_athena, results_page):
        """Pages are fetched in order and accumulated."""
        mock_athena.get_query_results.side_effect = [
            results_page(COLUMNS, [['name', 'count']] + data_rows(4), next_token='A'),
            results_page(COLUMNS, data_rows(5, start=4), next_token='B'),
            results_page(COLUMNS, data_rows(3, start=9)),
        ]
        query = make_query()

        results = ResultPageDecoder(transport).drain(query)

        # 5 + 5 + 3 rows, minus the header on page one
        assert len(results) == 12
        assert [r['count'] for r in results] == list(range(12))
        assert mock_athena.get_query_results.call_args_list == [
            call(QueryExecutionId='exec-123'),
            call(QueryExecutionId='exec-123', NextToken='A'),
            call(QueryExecutionId='exec-123', NextToken='B'),
        ]

    def test_page_size_forwarded(self, transport, mock_athena, results_page):
        """The configured page size is sent on every fetch."""
        mock_athena.get_query_results.side_effect = [
            results_page(COLUMNS, [['name', 'count']] + data_rows(1), next_token='A'),
            results_page(COLUMNS, data_rows(1, start=1)),
        ]

        ResultPageDecoder(transport, page_size=2).drain(make_query())

        for fetch in mock_athena.get_query_results.call_args_list:
            assert fetch.kwargs['MaxResults'] == 2

    def test_header_only_first_page(self, transport, mock_athena, results_page):
        """A header-only first page followed by data pages decodes every data row."""
        mock_athena.get_query_results.side_effect = [
            results_page(COLUMNS, [['name', 'count']], next_token='A'),
            results_page(COLUMNS, data_rows(2)),
        ]

        results = ResultPageDecoder(transport).drain(make_query())

        assert [r['name'] for r in results] == ['row-0', 'row-1']

    def test_empty_result(self, transport, mock_athena, results_page):
        """A query with only a header yields no records."""
        mock_athena.get_query_results.return_value = results_page(COLUMNS, [], include_header=True)

        assert ResultPageDecoder(transport).drain(make_query()) == []
