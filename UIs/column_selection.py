import tkinter as tk
from tkinter import ttk

PLACEHOLDERS = {
    'sales_lookup_col': "Select Sales lookup column",
    'account_lookup_col': "Select Account lookup column",
    'amount_col': "Select Sales amount column",
}


class ColumnSelection:
    """Comboboxes for the sales lookup, account lookup and amount columns."""

    def __init__(self, parent, model, *, on_change):
        self.parent = parent
        self.model = model
        self.on_change = on_change

        self._combos = {}
        self._build_ui()

    def _build_ui(self):
        frame = ttk.LabelFrame(self.parent, text="2. Map columns", padding=10)
        frame.pack(pady=5, padx=10, fill='x')

        fields = [
            ('sales_lookup_col', "Sales lookup column:"),
            ('account_lookup_col', "Account lookup column:"),
            ('amount_col', "Sales amount column:"),
        ]
        for row, (attr, label) in enumerate(fields):
            tk.Label(frame, text=label).grid(row=row, column=0, sticky='w', pady=2)
            combo = ttk.Combobox(frame, values=[], width=40, state='disabled')
            combo.set(PLACEHOLDERS[attr])
            combo.grid(row=row, column=1, sticky='w', padx=5, pady=2)
            combo.bind('<<ComboboxSelected>>', lambda _e, a=attr: self._on_select(a))
            self._combos[attr] = combo

    def refresh(self, kind):
        """Repopulate the comboboxes fed by the table that was just loaded."""
        if kind == 'sales':
            attrs = ['sales_lookup_col', 'amount_col']
            headers = self.model.sales_headers
        else:
            attrs = ['account_lookup_col']
            headers = self.model.account_headers

        for attr in attrs:
            combo = self._combos[attr]
            combo.config(values=headers, state='readonly')
            current = getattr(self.model, attr)
            combo.set(current if current else PLACEHOLDERS[attr])

    def _on_select(self, attr):
        value = self._combos[attr].get()
        setattr(self.model, attr, value if value != PLACEHOLDERS[attr] else None)
        self.on_change()
