import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import pandas as pd

from logics.errors import FileLoadError

logger = logging.getLogger(__name__)

CSV_ENCODINGS = ['utf-8', 'utf-8-sig', 'latin-1', 'cp1252']
SUPPORTED_SUFFIXES = ('.xlsx', '.xlsm', '.csv')


def load_first_sheet(path):
    """
    Read the first sheet of a workbook (or a CSV file) into a DataFrame.

    Every cell is kept as read (object dtype) and blank cells become '' so
    each row has a value for every header. Column names are strings.

    Args:
        path: Path to an .xlsx/.xlsm/.csv file.

    Returns:
        DataFrame with one row per data row of the sheet.

    Raises:
        FileLoadError: If the file is missing, unreadable, has no data rows
            or no header row, or is not an .xlsx/.xlsm/.csv file.
    """
    path = Path(path)
    if not path.is_file():
        raise FileLoadError(f"File not found: {path.name}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise FileLoadError(
            f"Unsupported file type '{suffix or path.name}'. Save the sheet as .xlsx or .csv."
        )

    if suffix == '.csv':
        df = _read_csv(path)
    else:
        try:
            df = pd.read_excel(path, sheet_name=0, dtype=object, keep_default_na=False)
        except Exception as e:
            logger.debug(f"[LOAD] read_excel failed for {path.name}: {e}")
            raise FileLoadError('Unable to parse the Excel file.') from e

    df = df.fillna('')
    df.columns = [str(col) for col in df.columns]

    if df.empty:
        raise FileLoadError('The first sheet has no data rows.')
    if not len(df.columns) or all(col.startswith('Unnamed:') for col in df.columns):
        raise FileLoadError('Could not detect headers. Ensure the first row contains column names.')

    logger.debug(f"[LOAD] {path.name}: {len(df)} rows, columns {list(df.columns)}")
    return df


def _read_csv(path):
    """Try multiple encodings to handle international characters."""
    for enc in CSV_ENCODINGS:
        try:
            df = pd.read_csv(path, encoding=enc, dtype=object, keep_default_na=False)
            logger.debug(f"[LOAD] {path.name} loaded with encoding: {enc}")
            return df
        except (UnicodeDecodeError, LookupError):
            continue
        except pd.errors.EmptyDataError as e:
            raise FileLoadError('The first sheet has no data rows.') from e
        except pd.errors.ParserError as e:
            raise FileLoadError(f"Unable to parse the CSV file: {e}") from e

    raise FileLoadError(f"Could not load {path.name} with any supported encoding")


def load_individual_files(file_paths):
    """
    Load the selected files in parallel (multi-threaded).

    A file that fails to load is reported in `errors` and never discards a
    table that loaded successfully.

    Args:
        file_paths: dict mapping table kind ('sales', 'account') to a file path.

    Returns:
        tuple: (tables, errors)
        - tables: dict of DataFrames keyed by table kind
        - errors: dict of error messages keyed by table kind

    Raises:
        ValueError: If no files were selected.
    """
    selected_files = {k: v for k, v in file_paths.items() if v is not None}
    if not selected_files:
        raise ValueError('No file selected.')

    tables = {}
    errors = {}

    with ThreadPoolExecutor(max_workers=min(len(selected_files), os.cpu_count() or 1)) as executor:
        futures = {
            executor.submit(load_first_sheet, path): kind
            for kind, path in selected_files.items()
        }

        for future in as_completed(futures):
            kind = futures[future]
            filename = Path(selected_files[kind]).name
            try:
                df = future.result()
            except (FileLoadError, OSError) as e:
                logger.warning(f"[LOAD] {filename}: {e}")
                errors[kind] = str(e)
            else:
                logger.info(f"[LOAD] Loaded {filename} ({len(df)} rows)")
                tables[kind] = df

    return tables, errors


def result_to_frame(result):
    """Rows of a successful result plus a trailing 'Grand Total' row."""
    records = [
        {'Account Number': row['account'], 'Count': row['count'], 'Amount': round(row['amount'], 2)}
        for row in result.rows
    ]
    records.append({
        'Account Number': 'Grand Total',
        'Count': result.total_count,
        'Amount': round(result.total_amount, 2),
    })
    return pd.DataFrame(records, columns=['Account Number', 'Count', 'Amount'])


def export_to_file(result, path):
    """
    Export a processing result to Excel or CSV.

    Excel output goes to a single "Results" sheet with the amount column
    formatted as #,##0.00. A path ending in .csv writes plain CSV.

    Args:
        result: Successful ProcessResult.
        path: Output .xlsx or .csv file path.

    Raises:
        ValueError: If the result holds no matched accounts.
    """
    if result is None or not result.ok:
        raise ValueError('No results to export. Process the files first.')

    df = result_to_frame(result)
    path = str(path)

    if path.lower().endswith('.csv'):
        df.to_csv(path, index=False)
    else:
        with pd.ExcelWriter(path, engine='xlsxwriter') as writer:
            df.to_excel(writer, sheet_name='Results', index=False)
            workbook = writer.book
            sheet = writer.sheets['Results']
            money = workbook.add_format({'num_format': '#,##0.00'})
            bold = workbook.add_format({'bold': True})
            sheet.set_column(0, 0, 22)
            sheet.set_column(1, 1, 10)
            sheet.set_column(2, 2, 16, money)
            sheet.set_row(len(df), None, bold)

    logger.info(f"[EXPORT] {len(result.rows)} accounts written to {path}")
