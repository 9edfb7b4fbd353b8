"""Development runner with hot reload.

Runs the TubeGenie API through main.main (uvicorn serving create_app) in a
child process, and restarts that process whenever a .py file under the
project directory changes.

Usage:
    python dev.py
"""
from watchfiles import run_process


def _run_server():
    from main import main
    main()


def _is_source(change, path: str) -> bool:
    return path.endswith(".py")


if __name__ == "__main__":
    print("Dev mode: serving the API with uvicorn, restarting on .py changes.")
    run_process(".", target=_run_server, watch_filter=_is_source)
