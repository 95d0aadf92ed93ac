import pytest
import pandas as pd
import numpy as np

from logics.computation import (
    normalize_value,
    parse_amount,
    detect_account_number_column,
    build_lookup_index,
    aggregate_matches,
    format_results,
    format_currency,
    format_count,
    run_matching,
    process_transactions,
    NO_MATCH_MESSAGE,
    MISSING_COLUMNS_MESSAGE,
    MISSING_TABLES_MESSAGE,
)
from logics.data_model import DataModel, ProcessResult
from logics.errors import ColumnSelectionError, NoMatchesError


# Fixtures for test data
@pytest.fixture
def account_df():
    return pd.DataFrame({
        'Lookup': ['A1'],
        'AccountNumber': ['1001'],
    })


@pytest.fixture
def sales_df():
    return pd.DataFrame({
        'Ref': ['A1', 'A1', 'B9'],
        'Amt': ['$10.00', '$5', '$1'],
    })


@pytest.fixture
def model(sales_df, account_df):
    m = DataModel()
    m.set_table('sales', sales_df, 'sales.xlsx')
    m.set_table('account', account_df, 'accounts.xlsx')
    m.sales_lookup_col = 'Ref'
    m.account_lookup_col = 'Lookup'
    m.amount_col = 'Amt'
    return m


def test_normalize_value():
    assert normalize_value(None) == ''
    assert normalize_value('  42  ') == '42'
    assert normalize_value(42) == '42'
    assert normalize_value(42.0) == '42'
    assert normalize_value(12.5) == '12.5'
    assert normalize_value(np.nan) == ''
    assert normalize_value('') == ''


def test_parse_amount():
    assert parse_amount('$1,234.50') == 1234.50
    assert parse_amount('abc') == 0
    assert parse_amount(42) == 42
    assert parse_amount(' $ 7 ') == 7
    assert parse_amount('-$12.25') == -12.25
    assert parse_amount('') == 0
    assert parse_amount(None) == 0
    assert parse_amount(np.nan) == 0
    assert parse_amount('Infinity') == 0
    assert parse_amount('1_000') == 0
    assert parse_amount('0x10') == 16
    assert parse_amount('0o17') == 15
    assert parse_amount('0b101') == 5
    assert parse_amount('-0x10') == 0


@pytest.mark.parametrize('headers, lookup_col, expected', [
    (['Account Number', 'Name'], 'Name', 'Account Number'),
    (['Acct Number'], 'Acct Number', 'Acct Number'),
    (['Account'], 'Account', 'Account'),
    (['Customer ID'], 'Customer ID', 'Customer ID'),
    (['Customer', 'accountnumber'], 'Customer', 'accountnumber'),
    (['My Account'], 'My Account', 'My Account'),
])
def test_detect_account_number_column(headers, lookup_col, expected):
    assert detect_account_number_column(headers, lookup_col) == expected


def test_detect_prefers_account_number_over_earlier_account_header():
    headers = ['Account', 'Acct Number', 'Account Number']
    assert detect_account_number_column(headers, 'Account') == 'Account Number'


def test_build_lookup_index_last_write_wins():
    df = pd.DataFrame({
        'Email': ['a@x.com', ' a@x.com ', 'b@x.com'],
        'Account Number': ['1', '2', '3'],
    })
    index = build_lookup_index(df, 'Email')
    assert index == {'a@x.com': '2', 'b@x.com': '3'}


def test_build_lookup_index_skips_blank_lookup_and_self_identifies():
    df = pd.DataFrame({
        'Code': ['', 'C2', 'C3'],
        'Account Number': ['1', '', 300],
    })
    index = build_lookup_index(df, 'Code')
    assert index == {'C2': 'C2', 'C3': '300'}


def test_build_lookup_index_empty_table():
    df = pd.DataFrame({'Code': [], 'Account': []})
    assert build_lookup_index(df, 'Code') == {}


def test_aggregate_matches_drops_unmatched(sales_df):
    aggregate, total_count, total_amount = aggregate_matches(sales_df, 'Ref', 'Amt', {'A1': '1001'})
    assert aggregate == {'1001': {'count': 2, 'amount': 15.0}}
    assert total_count == 2
    assert total_amount == pytest.approx(15.0)


def test_aggregate_matches_numeric_keys_and_blank_rows():
    sales = pd.DataFrame({
        'Customer': [42, '42 ', '', 7.0, 'zz'],
        'Amount': ['1,000.00', 'bad', '$99', 2.5, '$3'],
    })
    index = {'42': 'ACC-42', '7': 'ACC-7'}
    aggregate, total_count, total_amount = aggregate_matches(sales, 'Customer', 'Amount', index)
    assert aggregate == {
        'ACC-42': {'count': 2, 'amount': 1000.0},
        'ACC-7': {'count': 1, 'amount': 2.5},
    }
    assert total_count == 3
    assert total_amount == pytest.approx(1002.5)


def test_grand_totals_equal_sum_of_entries():
    sales = pd.DataFrame({
        'Ref': ['a', 'b', 'c', 'a', 'b', 'x'],
        'Amt': ['0.10', '0.20', '0.30', '1,000', '$2.75', '5'],
    })
    index = {'a': '1', 'b': '2', 'c': '1'}
    aggregate, total_count, total_amount = aggregate_matches(sales, 'Ref', 'Amt', index)
    assert total_count == sum(e['count'] for e in aggregate.values()) == 5
    assert total_amount == pytest.approx(sum(e['amount'] for e in aggregate.values()))


def test_format_helpers():
    assert format_currency(1234.5) == '1,234.50'
    assert format_currency(0) == '0.00'
    assert format_currency(-5) == '-5.00'
    assert format_count(1234) == '1,234'


def test_format_results_sorts_as_strings():
    aggregate = {
        '3': {'count': 1, 'amount': 1.0},
        '100': {'count': 1, 'amount': 2.0},
        '20': {'count': 1, 'amount': 3.0},
    }
    result = format_results(aggregate, 3, 6.0)
    assert [row['account'] for row in result.rows] == ['100', '20', '3']
    assert result.account_count == 3
    assert result.total_amount_text == '6.00'
    assert result.message == 'Processed 3 matched transactions across 3 accounts.'


def test_format_results_orders_mixed_case_ignoring_case():
    aggregate = {
        'acc-b': {'count': 1, 'amount': 1.0},
        'ACC-A': {'count': 1, 'amount': 1.0},
        'Acc-c': {'count': 1, 'amount': 1.0},
    }
    result = format_results(aggregate, 3, 3.0)
    assert [row['account'] for row in result.rows] == ['ACC-A', 'acc-b', 'Acc-c']


def test_run_matching_end_to_end(model):
    result = run_matching(model)
    assert result.ok
    assert result.account_column == 'AccountNumber'
    assert len(result.rows) == 1
    row = result.rows[0]
    assert row['account'] == '1001'
    assert row['count'] == 2
    assert row['amount'] == pytest.approx(15.0)
    assert row['amount_text'] == '15.00'
    assert result.total_count == 2
    assert result.total_amount_text == '15.00'


def test_run_matching_no_matches(model):
    model.set_table('account', pd.DataFrame({'Lookup': ['Z1'], 'Account Number': ['9']}))
    model.account_lookup_col = 'Lookup'
    with pytest.raises(NoMatchesError):
        run_matching(model)


def test_process_transactions_success_stores_result(model):
    result = process_transactions(model)
    assert result.status == ProcessResult.SUCCESS
    assert model.result is result
    assert result.message == 'Processed 2 matched transactions across 1 accounts.'


def test_process_transactions_no_match(model):
    model.set_table('sales', pd.DataFrame({'Ref': ['Q'], 'Amt': ['1']}))
    model.sales_lookup_col = 'Ref'
    model.amount_col = 'Amt'
    result = process_transactions(model)
    assert result.status == ProcessResult.NO_MATCH
    assert result.message == NO_MATCH_MESSAGE
    assert result.rows == []
    assert model.result is None


def test_process_transactions_missing_selection_clears_result(model):
    assert process_transactions(model).ok
    model.amount_col = None
    result = process_transactions(model)
    assert result.status == ProcessResult.INVALID
    assert result.message == MISSING_COLUMNS_MESSAGE
    assert model.result is None


def test_process_transactions_missing_table(account_df):
    m = DataModel()
    m.set_table('account', account_df)
    m.sales_lookup_col = 'Ref'
    m.account_lookup_col = 'Lookup'
    m.amount_col = 'Amt'
    result = process_transactions(m)
    assert result.status == ProcessResult.INVALID
    assert result.message == MISSING_TABLES_MESSAGE


def test_unknown_column_is_rejected(model):
    model.amount_col = 'Total'
    with pytest.raises(ColumnSelectionError, match="'Total'"):
        run_matching(model)


def test_rerun_starts_from_empty_state(model):
    first = process_transactions(model)
    second = process_transactions(model)
    assert first.total_count == second.total_count == 2
    assert second.rows[0]['count'] == 2
