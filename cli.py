#!/usr/bin/env python3
from contributors.orchestrator import main


if __name__ == "__main__":
    main()
