import asyncio
import threading
import tkinter as tk
from tkinter import scrolledtext
from tkinter import ttk

from assistant_core.api import service
from assistant_core.config.settings import settings
from assistant_core.providers.registry import LOCAL_PROVIDER_NAME, PROVIDER_CONFIGS


class App:
    def __init__(self, root):
        self.root = root
        self.root.title("Pownin Assistant")
        self.sending = False
        self.poll_ms = int(settings.metrics_poll_interval * 1000)

        header = tk.Frame(root)
        header.pack(fill=tk.X)
        tk.Label(header, text="Pownin Assistant", font=("TkDefaultFont", 14, "bold")).pack(side=tk.LEFT)
        self.metrics_label = tk.Label(header, text="CPU --  MEM --")
        self.metrics_label.pack(side=tk.RIGHT)

        self.chat = scrolledtext.ScrolledText(root, width=80, height=22, wrap=tk.WORD)
        self.chat.pack(fill=tk.BOTH, expand=True)
        self.chat.tag_config("user", foreground="#1a73e8")
        self.chat.tag_config("assistant", foreground="#34a853")
        self.chat.tag_config("system", foreground="#5f6368")
        self.chat.tag_config("error", foreground="#d93025")

        row_in = tk.Frame(root)
        row_in.pack(fill=tk.X)
        self.entry = tk.Entry(row_in)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.entry.bind("<Return>", self.on_send_event)
        self.send_btn = tk.Button(row_in, text="Send", command=self.on_send)
        self.send_btn.pack(side=tk.LEFT)

        prefs_row = tk.LabelFrame(root, text="Provider")
        prefs_row.pack(fill=tk.X)
        prefs = service.load_preferences()
        choices = list(PROVIDER_CONFIGS) + [LOCAL_PROVIDER_NAME]
        self.provider_box = ttk.Combobox(prefs_row, values=choices, state="readonly", width=12)
        self.provider_box.set(prefs.provider or LOCAL_PROVIDER_NAME)
        self.provider_box.pack(side=tk.LEFT)
        tk.Label(prefs_row, text="API key").pack(side=tk.LEFT)
        self.key_entry = tk.Entry(prefs_row, show="*")
        self.key_entry.insert(0, prefs.api_key)
        self.key_entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(prefs_row, text="Save", command=self.on_save_prefs).pack(side=tk.LEFT)

        self.status = tk.Label(root, text="Ready", anchor=tk.W)
        self.status.pack(fill=tk.X)

        for m in service.list_messages():
            self._append(m["role"], m["content"])
        self.refresh_metrics()

    def _append(self, role, content):
        label = "You" if role == "user" else "Assistant"
        self.chat.insert(tk.END, f"{label}: {content}\n\n", role)
        self.chat.see(tk.END)

    def refresh_metrics(self):
        snap = service.system_snapshot()
        self.metrics_label.config(
            text=f"CPU {snap['cpu_usage']:.1f}%  MEM {snap['memory_usage']:.1f}%  {snap['architecture']}  AI {snap['current_provider']}"
        )
        self.root.after(self.poll_ms, self.refresh_metrics)

    def on_send(self):
        if self.sending:
            return
        text = self.entry.get().strip()
        if not text:
            return
        self.sending = True
        self.send_btn.config(state=tk.DISABLED)
        self.entry.delete(0, tk.END)
        self._append("user", text)
        self.status.config(text="Thinking...")

        def worker():
            try:
                res = asyncio.run(service.send_message(text))
                self.root.after(0, lambda: self.on_response(res, None))
            except Exception as e:
                self.root.after(0, lambda err=e: self.on_response(None, err))
        threading.Thread(target=worker, daemon=True).start()

    def on_send_event(self, event):
        self.on_send()
        return "break"

    def on_response(self, res, err):
        if err:
            self.chat.insert(tk.END, f"Error: {err}\n\n", "error")
            self.status.config(text="Error")
        else:
            self._append("assistant", res["assistant_message"]["content"])
            self.status.config(text=f"Answered by {res['current_provider']}")
        self.chat.see(tk.END)
        self.sending = False
        self.send_btn.config(state=tk.NORMAL)

    def on_save_prefs(self):
        try:
            res = service.save_preferences(self.provider_box.get(), self.key_entry.get())
        except Exception as e:
            self.chat.insert(tk.END, f"Error: {e}\n\n", "error")
            return
        self.status.config(text=f"Saved. Available: {', '.join(res['available_providers'])}")


def main():
    root = tk.Tk()
    App(root)
    root.mainloop()


if __name__ == "__main__":
    main()
