import logging
import threading
import tkinter as tk
from tkinter import ttk

logger = logging.getLogger(__name__)


class LoadingDialog:
    """
    Modal "loading" window that reads a file on a worker thread.

    The worker never touches Tk widgets; its outcome is handed back to the
    main loop with root.after, where on_done(result, error) is called once
    the dialog is gone.

    Args:
        root: Parent Tk window.
        filename: Name shown while the file is being read.
    """

    def __init__(self, root, filename):
        self._root = root

        self._dialog = tk.Toplevel(root)
        self._dialog.title("Loading file...")
        self._dialog.geometry("360x110")
        self._dialog.resizable(False, False)
        self._dialog.transient(root)
        self._dialog.grab_set()

        tk.Label(self._dialog, text="Reading first sheet", font=("Arial", 11, "bold")).pack(pady=(12, 4))
        tk.Label(self._dialog, text=filename, fg="blue").pack()

        self._bar = ttk.Progressbar(self._dialog, mode='indeterminate', length=280)
        self._bar.pack(pady=10)
        self._bar.start(12)

    def run(self, fn, on_done):
        """
        Call fn() in the background, then on_done(result, error) on the main thread.

        error is None on success, otherwise the exception message.
        """
        def worker():
            try:
                result, error = fn(), None
            except Exception as e:
                logger.exception(f"[LOAD] {e}")
                result, error = None, str(e)
            self._root.after(0, lambda: self._finish(on_done, result, error))

        threading.Thread(target=worker, daemon=True).start()

    def _finish(self, on_done, result, error):
        if self._dialog.winfo_exists():
            self._bar.stop()
            self._dialog.destroy()
        on_done(result, error)
