TABLE_KINDS = ('sales', 'account')


class DataModel:
    """Shared state container for one lookup session."""

    def __init__(self):
        self.file_paths = {'sales': None, 'account': None}
        self.sales_df = None                        # Transactions table (first sheet)
        self.account_df = None                      # Accounts table (first sheet)
        self.sales_headers = []                     # Column names in sheet order
        self.account_headers = []
        self.sales_lookup_col = None                # Join column in the sales table
        self.account_lookup_col = None              # Join column in the account table
        self.amount_col = None                      # Amount column in the sales table
        self.result = None                          # Last ProcessResult, if any

    def set_table(self, kind, df, path=None):
        """
        Store a loaded table in its own slot.

        Loading one table never touches the other one, so the two loads can
        finish in any order. Column selections that no longer exist in the new
        headers are reset.
        """
        if kind not in TABLE_KINDS:
            raise ValueError(f"Unknown table kind: {kind}")

        headers = [str(col) for col in df.columns]
        self.file_paths[kind] = path
        if kind == 'sales':
            self.sales_df = df
            self.sales_headers = headers
            if self.sales_lookup_col not in headers:
                self.sales_lookup_col = None
            if self.amount_col not in headers:
                self.amount_col = None
        else:
            self.account_df = df
            self.account_headers = headers
            if self.account_lookup_col not in headers:
                self.account_lookup_col = None
        self.result = None

    def has_table(self, kind):
        df = self.sales_df if kind == 'sales' else self.account_df
        return df is not None and len(df) > 0

    def is_ready(self):
        """True once both tables are loaded and every column is chosen."""
        return (
            self.has_table('sales')
            and self.has_table('account')
            and bool(self.sales_lookup_col)
            and bool(self.account_lookup_col)
            and bool(self.amount_col)
        )


class ProcessResult:
    """
    Outcome of one processing run.

    status is one of 'success', 'no_match' or 'invalid'. Only successful
    results carry rows; each row is a dict with the keys
    account, count, amount, count_text and amount_text.
    """

    SUCCESS = 'success'
    NO_MATCH = 'no_match'
    INVALID = 'invalid'

    def __init__(self, status, message, rows=None, total_count=0, total_amount=0.0,
                 total_count_text="0", total_amount_text="0.00", account_column=None):
        self.status = status
        self.message = message
        self.rows = rows or []
        self.total_count = total_count
        self.total_amount = total_amount
        self.total_count_text = total_count_text
        self.total_amount_text = total_amount_text
        self.account_column = account_column

    @property
    def ok(self):
        return self.status == self.SUCCESS

    @property
    def account_count(self):
        return len(self.rows)

    def __repr__(self):
        return f"ProcessResult(status={self.status!r}, accounts={self.account_count}, total_count={self.total_count})"
