import tkinter as tk
from tkinter import ttk, messagebox, filedialog
from pathlib import Path

from logics.data_model import DataModel
from logics.file_handler import load_individual_files, export_to_file
from logics.computation import process_transactions

from UIs.file_input import FileInputPanel, FILE_LABELS
from UIs.column_selection import ColumnSelection
from UIs.results_view import ResultsView
from UIs.loading_dialog import LoadingDialog


class TransactionLookupApp:
    """Main window: load both files, map columns, process and export."""

    def __init__(self, root):
        self.root = root
        self.root.title("Transaction Lookup Tool")
        self.root.geometry("760x720")

        self.model = DataModel()

        self._build_ui()
        self._toggle_buttons()

    def _build_ui(self):
        self.file_panel = FileInputPanel(self.root, on_file_selected=self._on_file_selected)
        self.columns = ColumnSelection(self.root, self.model, on_change=self._toggle_buttons)

        actions = ttk.Frame(self.root)
        actions.pack(pady=10, padx=10, fill='x')
        self.process_btn = ttk.Button(actions, text="Process", command=self._on_process)
        self.process_btn.pack(side='left')
        self.export_btn = ttk.Button(actions, text="Export...", command=self._on_export)
        self.export_btn.pack(side='left', padx=10)

        self.message = tk.Label(self.root, text="", anchor='w', justify='left', wraplength=720)
        self.message.pack(padx=10, fill='x')

        self.results = ResultsView(self.root)

    # ── File loading ────────────────────────────────────────

    def _on_file_selected(self, kind, path):
        """Load one file in the background; the other table is left alone."""
        self._clear_message()
        LoadingDialog(self.root, Path(path).name).run(
            lambda: load_individual_files({kind: path}),
            on_done=lambda loaded, err: self._finish_loading(kind, path, loaded, err),
        )

    def _finish_loading(self, kind, path, loaded, error):
        if error is None:
            tables, errors = loaded
            error = errors.get(kind)
        if error is not None:
            self._set_message(f"{FILE_LABELS[kind]} error: {error}", error=True)
            if self.model.file_paths[kind] is None:
                self.file_panel.set_status(kind, f"Could not load {Path(path).name}", ok=False)
            return

        df = tables[kind]
        self.model.set_table(kind, df, path)
        self.file_panel.set_status(kind, f"Loaded {Path(path).name} ({len(df)} rows)")
        self.columns.refresh(kind)
        self.results.clear()
        self._toggle_buttons()

    # ── Processing ──────────────────────────────────────────

    def _on_process(self):
        self._clear_message()
        self.results.clear()

        result = process_transactions(self.model)
        if result.ok:
            self.results.show(result)
            self._set_message(result.message, success=True)
        else:
            self._set_message(result.message, error=True)
        self._toggle_buttons()

    def _on_export(self):
        if self.model.result is None:
            messagebox.showerror("Error", "No results to export. Process the files first.")
            return

        path = filedialog.asksaveasfilename(
            defaultextension=".xlsx",
            filetypes=[("Excel", "*.xlsx"), ("CSV", "*.csv")],
        )
        if path:
            try:
                export_to_file(self.model.result, path)
                messagebox.showinfo("Exported", f"Results written to: {path}")
            except Exception as e:
                messagebox.showerror("Export error", str(e))

    # ── Helpers ──────────────────────────────────────────────

    def _toggle_buttons(self):
        self.process_btn.config(state='normal' if self.model.is_ready() else 'disabled')
        self.export_btn.config(state='normal' if self.model.result is not None else 'disabled')

    def _set_message(self, text, error=False, success=False):
        color = "red" if error else "green" if success else "black"
        self.message.config(text=text, fg=color)

    def _clear_message(self):
        self._set_message("")
