"""Intent interpretation.

The intent layer converts an English free-text calculator question into a formatted answer by
walking an ordered table of keyword rules over the lowercased query and its extracted numbers.
"""
