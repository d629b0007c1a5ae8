#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""python -m zmqcat"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
