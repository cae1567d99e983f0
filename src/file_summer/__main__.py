import sys

from file_summer.cli import main

if __name__ == "__main__":
    sys.exit(main())
