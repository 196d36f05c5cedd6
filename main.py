"""
Availability engine entry point.

Delegates to the scenario CLI in ``bookable.cli``.

Usage:
    Slot list:      python main.py slots --scenario scenario.json --date 2026-03-02
    Month overview: python main.py month --scenario scenario.json --year 2026 --month 3
"""

from bookable.cli import main

if __name__ == "__main__":
    main()
