import sys

from cargo_janitor.cli import main

if __name__ == "__main__":
    sys.exit(main())
