import sys

from wayther.cli import main

# Initialize application
if __name__ == '__main__':
    sys.exit(main())
