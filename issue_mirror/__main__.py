"""Run a mirror pass with ``python -m issue_mirror``."""

from .worker import run

if __name__ == "__main__":
    run()
