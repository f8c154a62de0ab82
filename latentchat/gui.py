"""
Tkinter overlay:
- Frameless, always-on-top, translucent; drag anywhere on the header to move
- Hidden from screen capture where the OS allows it
- Ctrl+Shift+H to hide/show
- Settings dialog for provider / model / API key
- Requests run on a background asyncio loop; input is disabled while waiting
"""

from __future__ import annotations

import asyncio
import threading
import tkinter as tk
from tkinter import scrolledtext

from .bridge import ChatBridge
from .config import APP_TITLE, DEFAULT_ALPHA, TOGGLE_HOTKEY, WINDOW_GEOMETRY
from .models import ChatSession
from .registry import describe, list_providers
from .utils import logger, mask_api_key, protect_window_content

BG = "#1e1e1e"
FG = "#e6e6e6"
PANEL = "#252526"
ACCENT = "#0e639c"


class AsyncioRunner:
    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

    def submit(self, coro, callback) -> None:
        fut = asyncio.run_coroutine_threadsafe(coro, self._loop)

        def done(f) -> None:
            try:
                result = f.result()
            except Exception as exc:
                logger.error("Background call failed: %s", exc, exc_info=True)
                result = {"ok": False, "error": f"Unexpected error: {exc}"}
            callback(result)

        fut.add_done_callback(done)

    def stop(self) -> None:
        self._loop.call_soon_threadsafe(self._loop.stop)


class SettingsDialog(tk.Toplevel):
    """Provider picker, model picker and key entry. Saves via the bridge."""

    def __init__(self, master: tk.Misc, bridge: ChatBridge, on_saved=None) -> None:
        super().__init__(master, bg=BG)
        self.bridge = bridge
        self.on_saved = on_saved
        self.title(f"{APP_TITLE} Settings")
        self.attributes("-topmost", True)
        self.resizable(False, False)

        self._config = bridge.get_config()
        providers = list_providers()
        self._names = {p.name: p.id for p in providers}

        self.provider_var = tk.StringVar(value=describe(self._config["activeProvider"]).name)
        self.model_var = tk.StringVar()
        self.key_var = tk.StringVar()
        self.label_var = tk.StringVar()
        self.help_var = tk.StringVar()
        self.error_var = tk.StringVar()

        opts = dict(bg=BG, fg=FG, anchor="w")
        tk.Label(self, text="Provider", **opts).pack(fill=tk.X, padx=12, pady=(12, 0))
        tk.OptionMenu(self, self.provider_var, *self._names,
                      command=lambda _: self._load_provider()).pack(fill=tk.X, padx=12)

        tk.Label(self, text="Model", **opts).pack(fill=tk.X, padx=12, pady=(8, 0))
        self.model_menu = tk.OptionMenu(self, self.model_var, "")
        self.model_menu.pack(fill=tk.X, padx=12)

        tk.Label(self, textvariable=self.label_var, **opts).pack(fill=tk.X, padx=12, pady=(8, 0))
        tk.Entry(self, textvariable=self.key_var, show="*", bg=PANEL, fg=FG,
                 insertbackground=FG, bd=0, width=48).pack(fill=tk.X, padx=12, ipady=4)
        tk.Label(self, textvariable=self.help_var, bg=BG, fg="#9cdcfe",
                 anchor="w").pack(fill=tk.X, padx=12)
        tk.Label(self, textvariable=self.error_var, bg=BG, fg="#f48771",
                 anchor="w").pack(fill=tk.X, padx=12)

        tk.Button(self, text="Save", bg=ACCENT, fg="white", bd=0, padx=14, pady=6,
                  command=self._save).pack(pady=12)

        self._load_provider()
        self.grab_set()

    def _provider_id(self) -> str:
        return self._names[self.provider_var.get()]

    def _load_provider(self) -> None:
        meta = describe(self._provider_id())
        current = self._config["providers"][meta.id]
        menu = self.model_menu["menu"]
        menu.delete(0, tk.END)
        for m in meta.models:
            menu.add_command(label=m.id, command=lambda v=m.id: self.model_var.set(v))
        self.model_var.set(current["selectedModel"])
        self.key_var.set(current["apiKey"])
        self.label_var.set(meta.key_label)
        hint = f" (saved: {mask_api_key(current['apiKey'])})" if current["apiKey"] else ""
        self.help_var.set(meta.help_text + hint)

    def _save(self) -> None:
        pid = self._provider_id()
        self._config["activeProvider"] = pid
        self._config["providers"][pid] = {
            "apiKey": self.key_var.get().strip(),
            "selectedModel": self.model_var.get(),
        }
        result = self.bridge.save_config(self._config)
        if not result["success"]:
            self.error_var.set(result["error"])
            return
        if self.on_saved:
            self.on_saved()
        self.destroy()


class ChatGUI:
    def __init__(self, root: tk.Tk, bridge: ChatBridge) -> None:
        self.root = root
        self.bridge = bridge
        self.session = ChatSession()
        self._hidden = False
        self._drag_origin = (0, 0)
        self.runner = AsyncioRunner()

        # Window
        self.root.title(APP_TITLE)
        self.root.overrideredirect(True)
        self.root.attributes("-topmost", True)
        self.root.attributes("-alpha", DEFAULT_ALPHA)
        self.root.geometry(WINDOW_GEOMETRY)
        self.root.resizable(False, False)
        self.root.configure(bg=BG)

        # Header: drag handle + settings/close
        header = tk.Frame(self.root, bg=BG)
        header.pack(fill=tk.X)
        self.status_var = tk.StringVar()
        title = tk.Label(header, textvariable=self.status_var, anchor="w",
                         bg=BG, fg="#9cdcfe", padx=8)
        title.pack(side=tk.LEFT, fill=tk.X, expand=True)
        for widget in (header, title):
            widget.bind("<ButtonPress-1>", self._start_drag)
            widget.bind("<B1-Motion>", self._drag)
        tk.Button(header, text="x", bg=BG, fg=FG, bd=0,
                  command=self._on_close).pack(side=tk.RIGHT, padx=4)
        tk.Button(header, text="Settings", bg=BG, fg=FG, bd=0,
                  command=self.open_settings).pack(side=tk.RIGHT)

        # Chat area
        self.chat_display = scrolledtext.ScrolledText(
            self.root, wrap=tk.WORD, state=tk.DISABLED,
            bg=PANEL, fg=FG, insertbackground=FG, bd=0, relief=tk.FLAT
        )
        self.chat_display.pack(fill=tk.BOTH, expand=True, padx=8, pady=(4, 4))

        # Input
        self.input_var = tk.StringVar()
        self.input_entry = tk.Entry(self.root, textvariable=self.input_var,
                                    bg=PANEL, fg=FG, insertbackground=FG,
                                    bd=0, relief=tk.FLAT)
        self.input_entry.pack(fill=tk.X, padx=8, pady=(0, 8), ipady=6)
        self.input_entry.bind("<Return>", lambda e: self.handle_send())

        self.root.bind_all(TOGGLE_HOTKEY, lambda e: self.toggle_visibility())

        self._append_bot(self.session.greeting)
        self._refresh_status()
        self.root.after(300, self._finish_init)
        logger.info("GUI ready.")

    # ---- helpers ----
    def _append(self, prefix: str, text: str) -> None:
        self.chat_display.configure(state=tk.NORMAL)
        self.chat_display.insert(tk.END, f"{prefix}{text}\n\n")
        self.chat_display.see(tk.END)
        self.chat_display.configure(state=tk.DISABLED)

    def _append_user(self, t: str) -> None:
        self._append("You: ", t)

    def _append_bot(self, t: str) -> None:
        self._append("AI: ", t)

    def _refresh_status(self) -> None:
        cfg = self.bridge.get_config()
        active = cfg["activeProvider"]
        model = cfg["providers"][active]["selectedModel"]
        self.status_var.set(f"{APP_TITLE}  ·  {describe(active).name} / {model}")

    def _finish_init(self) -> None:
        self.root.update_idletasks()
        protect_window_content(self.root.winfo_id())
        if not self.bridge.check_api_key():
            self.open_settings()
        self.input_entry.focus_set()

    def open_settings(self) -> None:
        SettingsDialog(self.root, self.bridge, on_saved=self._refresh_status)

    # ---- events ----
    def _start_drag(self, event) -> None:
        self._drag_origin = (event.x, event.y)

    def _drag(self, event) -> None:
        x = self.root.winfo_x() + event.x - self._drag_origin[0]
        y = self.root.winfo_y() + event.y - self._drag_origin[1]
        self.root.geometry(f"+{x}+{y}")

    def toggle_visibility(self) -> None:
        if not self._hidden:
            self.root.withdraw()
            self._hidden = True
        else:
            self.root.deiconify()
            self.root.lift()
            self.root.attributes("-topmost", True)
            self._hidden = False
            self.input_entry.focus_set()
        logger.info("Window %s.", "hidden" if self._hidden else "shown")

    def handle_send(self) -> None:
        query = self.input_var.get().strip()
        if not query:
            return

        self._append_user(query)
        self.input_var.set("Thinking...")
        self.input_entry.configure(state=tk.DISABLED)

        def done(result: dict) -> None:
            self.root.after(0, lambda: self._show_result(query, result))

        self.runner.submit(self.bridge.send_to_ai(query, self.session.outgoing()), done)

    def _show_result(self, query: str, result: dict) -> None:
        if result["ok"]:
            self.session.record(query, result["reply"])
            self._append_bot(result["reply"])
        else:
            self._append_bot(f"Error: {result['error']}")
        self.input_entry.configure(state=tk.NORMAL)
        self.input_var.set("")
        self.input_entry.focus_set()

    def _on_close(self) -> None:
        logger.info("Closing.")
        try:
            self.runner.stop()
        finally:
            self.root.destroy()
