# -*- coding: utf-8 -*-
"""Personal data migrators (FatSecret food diary export)."""

__version__ = "0.1.0"
