#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Print vertical Japanese addresses on 100 x 148 mm postcards.
"""

# local repo modules
import hagaki_atena.cli


if __name__ == "__main__":
	hagaki_atena.cli.main()
