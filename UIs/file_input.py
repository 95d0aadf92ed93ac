import tkinter as tk
from tkinter import ttk, filedialog

FILE_LABELS = {'sales': "Sales file", 'account': "Account file"}


class FileInputPanel:
    """File pickers for the sales and account workbooks."""

    def __init__(self, parent, on_file_selected):
        self.parent = parent
        self.on_file_selected = on_file_selected

        self._labels = {}
        self._build_ui()

    def _build_ui(self):
        frame = ttk.LabelFrame(self.parent, text="1. Upload files", padding=10)
        frame.pack(pady=(10, 5), padx=10, fill='x')

        for row, kind in enumerate(['sales', 'account']):
            tk.Label(frame, text=f"{FILE_LABELS[kind]}:").grid(row=row, column=0, sticky='w', pady=2)
            ttk.Button(
                frame,
                text="Browse...",
                command=lambda k=kind: self._browse(k),
            ).grid(row=row, column=1, sticky='w', padx=5, pady=2)
            lbl = tk.Label(frame, text="No file loaded", fg="gray")
            lbl.grid(row=row, column=2, sticky='w', pady=2)
            self._labels[kind] = lbl

    def _browse(self, kind):
        path = filedialog.askopenfilename(
            filetypes=[("Excel/CSV files", "*.xlsx *.xlsm *.csv")],
        )
        if path:
            self.on_file_selected(kind, path)

    def set_status(self, kind, text, ok=True):
        self._labels[kind].config(text=text, fg="green" if ok else "red")
