#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Entry Point for the executable, when run from a source checkout."""

import sys

import autovalidate

if __name__ == "__main__":
    sys.exit(autovalidate.main())
