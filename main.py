import argparse
import logging
import sys

from logics.computation import process_transactions
from logics.data_model import DataModel
from logics.file_handler import load_individual_files, export_to_file

logger = logging.getLogger(__name__)


def configure_logging(verbose=False):
    """Configure console logging with minimal formatting."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Match sales rows to accounts and total them per account number. "
                    "Run without files to open the desktop window."
    )
    parser.add_argument("sales_file", nargs="?", help="Sales workbook (.xlsx/.xlsm/.csv)")
    parser.add_argument("account_file", nargs="?", help="Account workbook (.xlsx/.xlsm/.csv)")
    parser.add_argument("--sales-lookup", help="Lookup column in the sales file")
    parser.add_argument("--account-lookup", help="Lookup column in the account file")
    parser.add_argument("--amount", help="Amount column in the sales file")
    parser.add_argument("--export", metavar="PATH", help="Write results to an .xlsx or .csv file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if bool(args.sales_file) != bool(args.account_file):
        parser.error("both sales_file and account_file are required for batch mode")
    return args


def run_batch(args):
    """Load both files, process them and print the per-account totals."""
    model = DataModel()
    tables, errors = load_individual_files({'sales': args.sales_file, 'account': args.account_file})

    for kind, path in (('sales', args.sales_file), ('account', args.account_file)):
        if kind in errors:
            label = 'Sales' if kind == 'sales' else 'Account'
            print(f"{label} file error: {errors[kind]}", file=sys.stderr)
        else:
            model.set_table(kind, tables[kind], path)
    if errors:
        return 1

    model.sales_lookup_col = args.sales_lookup
    model.account_lookup_col = args.account_lookup
    model.amount_col = args.amount

    result = process_transactions(model)
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1

    width = max([len("Account Number")] + [len(row['account']) for row in result.rows])
    print(f"{'Account Number':<{width}}  {'Count':>10}  {'Amount':>16}")
    for row in result.rows:
        print(f"{row['account']:<{width}}  {row['count_text']:>10}  {row['amount_text']:>16}")
    print(f"{'Grand Total':<{width}}  {result.total_count_text:>10}  {result.total_amount_text:>16}")
    print(result.message)

    if args.export:
        try:
            export_to_file(result, args.export)
        except (OSError, ValueError) as e:
            print(f"Export error: {e}", file=sys.stderr)
            return 1
        print(f"Results written to: {args.export}")

    return 0


def run_gui():
    import tkinter as tk
    from UIs.app import TransactionLookupApp

    logger.debug("Initializing GUI...")
    root = tk.Tk()
    TransactionLookupApp(root)
    root.mainloop()
    return 0


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.sales_file:
        return run_batch(args)
    return run_gui()


if __name__ == "__main__":
    sys.exit(main())
