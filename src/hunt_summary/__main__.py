"""Allow ``python -m hunt_summary``."""

from .cli import main

if __name__ == "__main__":
    main()
