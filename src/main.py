"""
Main entry point for running the staleness watchdog.
"""

from staleness.cli import enable_crash_diagnostics, main

if __name__ == "__main__":
    enable_crash_diagnostics()
    raise SystemExit(main())
