"""Allow ``python -m charforge``."""

from charforge.cli import main

if __name__ == "__main__":
    main()
