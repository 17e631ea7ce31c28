"""Allow running as: python -m cfbspread"""
from cfbspread.main import cli_main

if __name__ == "__main__":
    cli_main()
