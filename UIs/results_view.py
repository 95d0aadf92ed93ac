import tkinter as tk
from tkinter import ttk


class ResultsView:
    """Table of per-account totals with a grand total line underneath."""

    def __init__(self, parent):
        self.frame = ttk.LabelFrame(parent, text="3. Results", padding=10)

        self.tree = ttk.Treeview(
            self.frame,
            columns=("Account", "Count", "Amount"),
            show="headings",
            height=14,
        )
        self.tree.heading("Account", text="Account Number")
        self.tree.heading("Count", text="Transactions")
        self.tree.heading("Amount", text="Total Amount")
        self.tree.column("Account", width=250)
        self.tree.column("Count", width=120, anchor='e')
        self.tree.column("Amount", width=180, anchor='e')

        scrollbar = ttk.Scrollbar(self.frame, command=self.tree.yview)
        self.tree.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side='right', fill='y')
        self.tree.pack(fill='both', expand=True)

        self.total_label = tk.Label(self.frame, text="", font=("Arial", 10, "bold"))
        self.total_label.pack(anchor='e', pady=(6, 0))

    def show(self, result):
        self.clear()
        for row in result.rows:
            self.tree.insert("", "end", values=(row['account'], row['count_text'], row['amount_text']))
        self.total_label.config(
            text=f"Grand total: {result.total_count_text} transactions, {result.total_amount_text}"
        )
        self.frame.pack(pady=5, padx=10, fill='both', expand=True)

    def clear(self):
        self.tree.delete(*self.tree.get_children())
        self.total_label.config(text="")
        self.frame.pack_forget()
