#!/usr/bin/env python3
"""
Dev mode runner for log-archive-counter

Runs the HTTP upload server under uvicorn and restarts it whenever a
source file in the package changes. Host and port come from HOST/PORT.
"""
import subprocess
import time
from pathlib import Path
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from log_archive_counter.config import get_host, get_port

PACKAGE_DIR = Path(__file__).parent / "log_archive_counter"
RESTART_COOLDOWN_SECONDS = 1.0


class ServerRestartHandler(FileSystemEventHandler):
    """Restarts the upload server on package source changes."""

    def __init__(self, host: str, port: int):
        self.command = [
            "poetry", "run", "uvicorn", "log_archive_counter.server_http:app",
            "--host", host, "--port", str(port),
        ]
        self.process = None
        self.last_restart = 0.0
        self.start_server()

    def start_server(self):
        self.stop()
        print(f"Starting: {' '.join(self.command)}")
        self.process = subprocess.Popen(
            self.command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1
        )
        self.last_restart = time.monotonic()
        print(f"Server started (PID: {self.process.pid}), watching {PACKAGE_DIR}")

    def on_modified(self, event):
        if event.is_directory or not event.src_path.endswith(".py"):
            return
        # Editors often write twice per save
        if time.monotonic() - self.last_restart < RESTART_COOLDOWN_SECONDS:
            return
        print(f"\n{event.src_path} changed - restarting...")
        self.start_server()

    def stop(self):
        if not self.process:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        self.process = None


def main():
    """Run the upload server with auto-restart."""
    host, port = get_host(), get_port()
    print(f"log-archive-counter dev mode on http://{host}:{port}")
    print("Ctrl+C to stop\n")

    handler = ServerRestartHandler(host, port)
    observer = Observer()
    observer.schedule(handler, str(PACKAGE_DIR), recursive=True)
    observer.start()

    try:
        while True:
            process = handler.process
            if process and process.stdout:
                line = process.stdout.readline()
                if line:
                    print(line, end="")
                    continue
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("\nStopping dev server...")
    finally:
        observer.stop()
        handler.stop()
        observer.join()


if __name__ == "__main__":
    main()
