"""Allow ``python -m ghamon``."""

from ghamon.cli.app import main

if __name__ == "__main__":
    main()
