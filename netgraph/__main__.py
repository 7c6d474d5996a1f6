import sys

from netgraph.app import main

if __name__ == "__main__":
    sys.exit(main())
