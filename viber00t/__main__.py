"""Allow running as ``python -m viber00t``."""

from .cli.main import main

if __name__ == '__main__':
    main()
