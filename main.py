#!/usr/bin/env python3
"""
RemoteReg v1.0
Cross-host registry inspection and editing over the remote registry service
"""

from cli.main import main


if __name__ == "__main__":
    main()
