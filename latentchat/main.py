"""
Entry point with absolute imports so the PyInstaller EXE runs cleanly.
Dev:  python -m latentchat.main
EXE:  dist\\LatentChat.exe
"""

from __future__ import annotations
import tkinter as tk

from latentchat.bridge import ChatBridge
from latentchat.gateway import ChatGateway
from latentchat.gui import ChatGUI
from latentchat.store import ConfigStore
from latentchat.utils import logger


def main() -> None:
    logger.info("==== LatentChat boot ====")
    gateway = ChatGateway(ConfigStore())
    root = tk.Tk()
    ChatGUI(root, ChatBridge(gateway))
    root.mainloop()


if __name__ == "__main__":
    main()
