#!/usr/bin/env python3
"""hostmend - host health checks and routine maintenance."""

from hostmend.cli import main

if __name__ == "__main__":
    main()
