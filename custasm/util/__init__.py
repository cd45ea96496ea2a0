"""Spans, big integers, bit vectors, output formats, files, overlaps, styling and symbols."""