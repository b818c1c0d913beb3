"""Helpers for choosing and formatting a server's network address."""