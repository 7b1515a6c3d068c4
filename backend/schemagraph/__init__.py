"""Schema graph assembly engine.

Collects structured-data pieces from pluggable providers, links them by id,
applies extension filters, validates them against schema.org type rules
and serializes the result as a JSON-LD graph.
"""

__version__ = "0.1.0"
