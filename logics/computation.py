import logging
import math
import re

import numpy as np
import pandas as pd

from logics.data_model import ProcessResult
from logics.errors import ColumnSelectionError, NoMatchesError

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = 'No matching records found for the selected lookup columns.'
MISSING_COLUMNS_MESSAGE = 'Please select all required columns before processing.'
MISSING_TABLES_MESSAGE = 'Load both files before processing.'

_AMOUNT_NOISE = re.compile(r'[$,\s]')
_DECIMAL_NUMBER = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')
_RADIX_NUMBER = re.compile(r'0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')


# ── Value normalizer ────────────────────────────────────────

def normalize_value(value):
    """
    Turn a raw cell into a trimmed string used as a join key.

    None and missing values become ''. Integral floats lose their trailing
    '.0' so the numeric cell 42 and the text cell '42' produce the same key.
    """
    if value is None:
        return ''
    if isinstance(value, (float, np.floating)):
        if math.isnan(value):
            return ''
        if float(value).is_integer():
            return str(int(value))
    return str(value).strip()


def parse_amount(value):
    """
    Parse an amount cell, tolerating '$', thousands separators and blanks.

    Numbers are returned unchanged. Anything that does not parse to a finite
    number counts as 0 instead of failing the whole run.

    Examples:
        parse_amount('$1,234.50') -> 1234.5
        parse_amount('abc')       -> 0
        parse_amount(42)          -> 42
        parse_amount('0x10')      -> 16
    """
    if isinstance(value, (bool, np.bool_)):
        return 0
    if isinstance(value, (int, float, np.number)):
        return value if math.isfinite(value) else 0

    text = _AMOUNT_NOISE.sub('', '' if value is None else str(value))
    if _RADIX_NUMBER.fullmatch(text):
        return float(int(text, 0))
    if not text or not _DECIMAL_NUMBER.fullmatch(text):
        return 0

    parsed = float(text)
    return parsed if math.isfinite(parsed) else 0


# ── Account index ───────────────────────────────────────────

def _matches_account_number(header):
    return re.search(r'account\s*number', header, re.IGNORECASE) is not None


def _matches_acct_number(header):
    return re.search(r'acct\s*number', header, re.IGNORECASE) is not None


def _is_account(header):
    return re.fullmatch(r'account', header, re.IGNORECASE) is not None


# Evaluated in order; the first detector that matches any header wins.
ACCOUNT_COLUMN_DETECTORS = [
    ('account number', _matches_account_number),
    ('acct number', _matches_acct_number),
    ('account', _is_account),
]


def detect_account_number_column(headers, account_lookup_col):
    """
    Pick the account-number column of the account table.

    Falls back to the selected account lookup column when no header looks
    like an account number.
    """
    for name, predicate in ACCOUNT_COLUMN_DETECTORS:
        for header in headers:
            if predicate(str(header)):
                logger.debug(f"[MATCH] Account column '{header}' detected by '{name}' rule")
                return header

    logger.debug(f"[MATCH] No account number column detected, using '{account_lookup_col}'")
    return account_lookup_col


def build_lookup_index(account_df, account_lookup_col, account_column=None):
    """
    Map each normalized lookup value to its normalized account number.

    Args:
        account_df: Account table.
        account_lookup_col: Column holding the join key.
        account_column: Column holding the account number. Detected from the
            table headers when omitted.

    Returns:
        dict of lookup value -> account number. Rows with a blank lookup value
        are skipped; on duplicate lookup values the last row wins. An account
        with a blank account number is identified by its lookup value.
    """
    if account_column is None:
        account_column = detect_account_number_column(list(account_df.columns), account_lookup_col)

    index = {}
    for lookup_raw, account_raw in zip(account_df[account_lookup_col], account_df[account_column]):
        lookup_value = normalize_value(lookup_raw)
        if not lookup_value:
            continue
        index[lookup_value] = normalize_value(account_raw) or lookup_value

    logger.info(f"[MATCH] Indexed {len(index)} lookup values from {len(account_df)} account rows")
    return index


# ── Join & aggregate ────────────────────────────────────────

def aggregate_matches(sales_df, sales_lookup_col, amount_col, lookup_index):
    """
    Join sales rows to accounts and total them per account number.

    Rows with a blank lookup value or a value missing from the index are
    dropped without being counted anywhere.

    Returns:
        tuple: (aggregate, total_count, total_amount)
        - aggregate: dict account number -> {'count': int, 'amount': float}
        - total_count / total_amount: grand totals over every matched row
    """
    keys = sales_df[sales_lookup_col].map(normalize_value)
    accounts = keys.map(lambda key: lookup_index.get(key) if key else None)

    matched = pd.DataFrame({
        'account': accounts,
        'amount': sales_df[amount_col].map(parse_amount).astype(float),
    })
    matched = matched[matched['account'].notna()]

    grouped = matched.groupby('account', sort=False)['amount'].agg(['size', 'sum'])
    aggregate = {
        account: {'count': int(count), 'amount': float(amount)}
        for account, count, amount in zip(grouped.index, grouped['size'], grouped['sum'])
    }

    total_count = int(len(matched))
    total_amount = float(matched['amount'].sum()) if total_count else 0.0

    logger.info(
        f"[MATCH] {total_count}/{len(sales_df)} sales rows matched {len(aggregate)} accounts"
    )
    return aggregate, total_count, total_amount


# ── Result formatting ───────────────────────────────────────

def format_currency(value):
    """Two decimals with thousands separators, e.g. 1234.5 -> '1,234.50'."""
    return f"{value:,.2f}"


def format_count(value):
    return f"{value:,}"


def _account_sort_key(account):
    text = str(account)
    return text.casefold(), text


def format_results(aggregate, total_count, total_amount, account_column=None):
    """
    Build a successful ProcessResult with rows sorted by account number.

    Account numbers are compared as strings ignoring case first, so '100'
    sorts before '20' and 'acc-b' sorts before 'Acc-c'.
    """
    rows = []
    for account in sorted(aggregate, key=_account_sort_key):
        entry = aggregate[account]
        rows.append({
            'account': account,
            'count': entry['count'],
            'amount': entry['amount'],
            'count_text': format_count(entry['count']),
            'amount_text': format_currency(entry['amount']),
        })

    message = (
        f"Processed {format_count(total_count)} matched transactions "
        f"across {format_count(len(aggregate))} accounts."
    )
    return ProcessResult(
        ProcessResult.SUCCESS,
        message,
        rows=rows,
        total_count=total_count,
        total_amount=total_amount,
        total_count_text=format_count(total_count),
        total_amount_text=format_currency(total_amount),
        account_column=account_column,
    )


# ── Processing entry points ─────────────────────────────────

def validate_selection(model):
    """Raise ColumnSelectionError unless the model can be processed."""
    selections = [
        (model.sales_lookup_col, model.sales_headers, 'Sales'),
        (model.account_lookup_col, model.account_headers, 'Account'),
        (model.amount_col, model.sales_headers, 'Sales'),
    ]
    if not all(col for col, _, _ in selections):
        raise ColumnSelectionError(MISSING_COLUMNS_MESSAGE)

    if not model.has_table('sales') or not model.has_table('account'):
        raise ColumnSelectionError(MISSING_TABLES_MESSAGE)

    for col, headers, label in selections:
        if col not in headers:
            raise ColumnSelectionError(f"Column '{col}' was not found in the {label} file.")


def run_matching(model):
    """
    Match the model's sales rows to its accounts and aggregate them.

    Args:
        model: DataModel with both tables loaded and all columns selected.

    Returns:
        ProcessResult with status 'success'.

    Raises:
        ColumnSelectionError: If a table or a column selection is missing.
        NoMatchesError: If no sales row matched any account.
    """
    validate_selection(model)

    account_column = detect_account_number_column(model.account_headers, model.account_lookup_col)
    lookup_index = build_lookup_index(model.account_df, model.account_lookup_col, account_column)

    aggregate, total_count, total_amount = aggregate_matches(
        model.sales_df, model.sales_lookup_col, model.amount_col, lookup_index
    )
    if not aggregate:
        raise NoMatchesError(NO_MATCH_MESSAGE)

    return format_results(aggregate, total_count, total_amount, account_column=account_column)


def process_transactions(model):
    """
    Run one processing pass and always come back with a ProcessResult.

    The previous result is discarded first, so a failed run never leaves
    stale totals on the model.
    """
    model.result = None
    try:
        result = run_matching(model)
    except ColumnSelectionError as e:
        logger.warning(f"[MATCH] {e}")
        return ProcessResult(ProcessResult.INVALID, str(e))
    except NoMatchesError as e:
        logger.info(f"[MATCH] {e}")
        return ProcessResult(ProcessResult.NO_MATCH, str(e))

    model.result = result
    logger.info(f"[MATCH] {result.message}")
    return result
