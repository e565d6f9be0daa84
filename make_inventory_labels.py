#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generate inventory label sheets and location QR codes from an inventory database.
"""

import sys

import inventory_labels.cli


if __name__ == "__main__":
	sys.exit(inventory_labels.cli.main())
