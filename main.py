"""NL2SQL - Natural Language to SQL."""

from adapters.inbound.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
