"""Allow running privdns as ``python -m privdns``."""

from privdns.cli import main

if __name__ == "__main__":
    main()
