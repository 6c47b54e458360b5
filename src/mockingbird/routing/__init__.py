"""Routing: template parsing, file-name derivation and route dataclasses.

Route tables are built fresh on every scan and never mutated after they
are published to the dispatcher.
"""
